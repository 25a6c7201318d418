"""Files service — business logic for file management."""

from datetime import datetime
from typing import Callable

from sharelink.api.files.dto.file import FileDTO, FileResponse, FileStatsResponse, FileStatus
from sharelink.api.files.repositories.files_repository import FilesRepository
from sharelink.lifecycle import is_live, utcnow
from sharelink.logger import logger
from sharelink.storage import ObjectStore, ObjectStoreError


class FilesService:
    def __init__(
        self,
        files: FilesRepository,
        store: ObjectStore,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.files = files
        self.store = store
        self.clock = clock

    def _to_response(self, record: FileDTO, now: datetime) -> FileResponse:
        return FileResponse(
            id=record.id,
            original_filename=record.original_filename,
            object_key=record.object_key,
            file_size=record.file_size,
            content_type=record.content_type,
            download_count=record.download_count,
            is_active=record.is_active,
            is_live=is_live(record.is_active, record.expires_at, now),
            has_password=record.password_hash is not None,
            uploader_ip=record.uploader_ip,
            created_at=record.created_at,
            expires_at=record.expires_at,
        )

    def list_files(self, status: FileStatus = "all", search: str | None = None) -> list[FileResponse]:
        now = self.clock()
        return [self._to_response(f, now) for f in self.files.list_all(now, status, search)]

    def get_file(self, file_id: str) -> FileResponse | None:
        record = self.files.get(file_id)
        return self._to_response(record, self.clock()) if record else None

    def get_stats(self) -> FileStatsResponse:
        return FileStatsResponse(**self.files.stats(self.clock()))

    def deactivate_file(self, file_id: str) -> bool:
        """Disable the share link; the blob stays until the file is deleted."""
        return self.files.deactivate(file_id)

    def delete_file(self, file_id: str) -> bool:
        """Delete the blob and the record.

        Blob and record are removed by two independent calls. A failed blob
        delete is logged and the record is removed regardless.
        """
        record = self.files.get(file_id)
        if not record:
            return False

        try:
            self.store.delete(record.object_key)
        except ObjectStoreError as e:
            logger.error(f"[Files] Blob delete failed for {record.object_key} (file {file_id}): {e}")

        self.files.delete(file_id)
        logger.info(f"[Files] Deleted {file_id}")
        return True
