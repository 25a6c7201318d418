"""Download service — checks a share and hands out a short-lived blob URL."""

from datetime import datetime
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError

from sharelink.api.download.dto.download import FileInfo, ResolvedDownload
from sharelink.api.files.dto.file import FileDTO
from sharelink.api.files.repositories.files_repository import FilesRepository
from sharelink.config import SIGNED_URL_TTL_SECONDS
from sharelink.errors import (
    FileExpired,
    FileNotFound,
    InvalidPassword,
    SignedUrlFailed,
    StoreUnavailable,
)
from sharelink.lifecycle import is_live, utcnow
from sharelink.logger import logger
from sharelink.security import verify_password
from sharelink.storage import ObjectStore, ObjectStoreError


class DownloadService:
    def __init__(
        self,
        files: FilesRepository,
        store: ObjectStore,
        signed_url_ttl: int = SIGNED_URL_TTL_SECONDS,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.files = files
        self.store = store
        self.signed_url_ttl = signed_url_ttl
        self.clock = clock

    def _get_live_file(self, file_id: str) -> FileDTO:
        try:
            record = self.files.get(file_id)
        except SQLAlchemyError as e:
            logger.error(f"[Download] Metadata lookup failed for {file_id}: {e}")
            raise StoreUnavailable(str(e)) from e

        if record is None:
            raise FileNotFound(f"No file {file_id}")
        if not is_live(record.is_active, record.expires_at, self.clock()):
            raise FileExpired(f"File {file_id} is inactive or expired")
        return record

    def describe(self, file_id: str) -> FileInfo:
        record = self._get_live_file(file_id)
        return FileInfo(
            id=record.id,
            filename=record.original_filename,
            size=record.file_size,
            content_type=record.content_type,
            download_count=record.download_count,
            expires_at=record.expires_at,
            password_required=record.password_hash is not None,
        )

    def resolve(self, file_id: str, password: str | None = None) -> ResolvedDownload:
        """Return a signed URL for a live file, checking its password if it has one.

        A password supplied for an unprotected file is ignored.
        """
        record = self._get_live_file(file_id)

        if record.password_hash is not None:
            supplied = (password or "").strip()
            if not supplied or not verify_password(supplied, record.password_hash):
                raise InvalidPassword(f"Password check failed for {file_id}")

        try:
            signed_url = self.store.signed_get_url(record.object_key, self.signed_url_ttl)
        except ObjectStoreError as e:
            logger.error(f"[Download] Could not sign URL for {record.object_key}: {e}")
            raise SignedUrlFailed(str(e)) from e

        # The counter is informational; a failure here must not block the download.
        try:
            self.files.increment_download(file_id)
        except SQLAlchemyError as e:
            logger.warning(f"[Download] Download count update failed for {file_id}: {e}")

        return ResolvedDownload(signed_url=signed_url, filename=record.original_filename)
