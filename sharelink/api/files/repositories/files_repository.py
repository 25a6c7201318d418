"""Files repository — data access layer."""

from datetime import datetime

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.orm import sessionmaker

from sharelink.api.files.dto.file import FileDTO, FileStatus
from sharelink.api.files.orm.file_model import FileModel
from sharelink.lifecycle import as_utc


LIKE_ESCAPE = "\\"


def _escape_like(text: str) -> str:
    """Make ``%`` and ``_`` in a search term match literally."""
    return (
        text.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def _model_to_dto(model: FileModel) -> FileDTO:
    return FileDTO(
        id=model.id,
        original_filename=model.original_filename,
        object_key=model.object_key,
        password_hash=model.password_hash,
        file_size=model.file_size or 0,
        content_type=model.content_type,
        download_count=model.download_count or 0,
        is_active=bool(model.is_active),
        uploader_ip=model.uploader_ip,
        created_at=as_utc(model.created_at),
        expires_at=as_utc(model.expires_at),
    )


class FilesRepository:
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def _get_session(self):
        return self._session_factory()

    def get(self, file_id: str) -> FileDTO | None:
        with self._get_session() as session:
            model = session.get(FileModel, file_id)
            return _model_to_dto(model) if model else None

    def id_exists(self, file_id: str) -> bool:
        with self._get_session() as session:
            return session.get(FileModel, file_id) is not None

    def create(
        self,
        file_id: str,
        original_filename: str,
        object_key: str,
        file_size: int,
        content_type: str,
        created_at: datetime,
        expires_at: datetime,
        password_hash: str | None = None,
        uploader_ip: str = "unknown",
    ) -> FileDTO:
        with self._get_session() as session:
            model = FileModel(
                id=file_id,
                original_filename=original_filename,
                object_key=object_key,
                password_hash=password_hash,
                file_size=file_size,
                content_type=content_type,
                download_count=0,
                is_active=True,
                uploader_ip=uploader_ip,
                created_at=created_at,
                expires_at=expires_at,
            )
            session.add(model)
            session.commit()
            return _model_to_dto(model)

    def increment_download(self, file_id: str) -> None:
        """Atomic ``count + 1`` in the database, no read-modify-write."""
        with self._get_session() as session:
            session.execute(
                update(FileModel)
                .where(FileModel.id == file_id)
                .values(download_count=FileModel.download_count + 1)
            )
            session.commit()

    def deactivate(self, file_id: str) -> bool:
        with self._get_session() as session:
            result = session.execute(
                update(FileModel).where(FileModel.id == file_id).values(is_active=False)
            )
            session.commit()
            return result.rowcount > 0

    def delete(self, file_id: str) -> bool:
        with self._get_session() as session:
            result = session.execute(delete(FileModel).where(FileModel.id == file_id))
            session.commit()
            return result.rowcount > 0

    def list_all(
        self,
        now: datetime,
        status: FileStatus = "all",
        search: str | None = None,
    ) -> list[FileDTO]:
        query = select(FileModel).order_by(FileModel.created_at.desc())
        if status == "active":
            query = query.where(FileModel.is_active.is_(True), FileModel.expires_at > now)
        elif status == "expired":
            query = query.where(or_(FileModel.is_active.is_(False), FileModel.expires_at <= now))
        if search:
            query = query.where(
                FileModel.original_filename.ilike(f"%{_escape_like(search)}%", escape=LIKE_ESCAPE)
            )

        with self._get_session() as session:
            return [_model_to_dto(m) for m in session.scalars(query)]

    def get_expired(self, now: datetime) -> list[FileDTO]:
        with self._get_session() as session:
            models = session.scalars(select(FileModel).where(FileModel.expires_at <= now))
            return [_model_to_dto(m) for m in models]

    def stats(self, now: datetime) -> dict:
        with self._get_session() as session:
            total_files, total_size, total_downloads = session.execute(
                select(
                    func.count(FileModel.id),
                    func.coalesce(func.sum(FileModel.file_size), 0),
                    func.coalesce(func.sum(FileModel.download_count), 0),
                )
            ).one()
            active_files = session.scalar(
                select(func.count(FileModel.id)).where(
                    FileModel.is_active.is_(True), FileModel.expires_at > now
                )
            )
        return {
            "total_files": total_files,
            "active_files": active_files or 0,
            "total_size": int(total_size),
            "total_downloads": int(total_downloads),
        }
