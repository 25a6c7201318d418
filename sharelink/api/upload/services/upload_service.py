"""Upload service — validates, admits, stores and records an upload."""

import re
import secrets
from datetime import datetime
from pathlib import PurePosixPath
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError

from sharelink.api.files.repositories.files_repository import FilesRepository
from sharelink.api.ratelimit.services.rate_limiter import RateLimiter
from sharelink.api.upload.dto.upload import UploadResult
from sharelink.config import MAX_FILE_SIZE, MAX_FILENAME_LENGTH
from sharelink.errors import (
    FileTooLarge,
    InvalidFilename,
    MetadataWriteFailed,
    RateLimited,
    StorageWriteFailed,
    UnsupportedType,
    UnusablePassword,
)
from sharelink.lifecycle import as_utc, compute_expiry, utcnow
from sharelink.logger import logger
from sharelink.security import hash_password, is_hashable
from sharelink.storage import ObjectStore, ObjectStoreError

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Anything under application/* is accepted as well
ALLOWED_TYPES = {
    # Documents
    "text/plain",
    "text/csv",
    # Images
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/svg+xml",
    # Video
    "video/mp4",
    "video/webm",
    "video/quicktime",
    "video/x-msvideo",
    # Audio
    "audio/mpeg",
    "audio/wav",
    "audio/ogg",
    "audio/mp3",
}

SAFE_NAME_MAX = 100
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def generate_object_key(filename: str, now: datetime) -> str:
    """Unique storage key: ``<unix ms>-<random>-<sanitized name>``.

    The sender's name only contributes a cleaned-up suffix, so it can neither
    collide with another upload nor escape the bucket prefix.
    """
    name = PurePosixPath(filename.replace("\\", "/")).name
    safe_name = _UNSAFE_CHARS.sub("_", name).strip("._")[:SAFE_NAME_MAX] or "file"
    timestamp = int(as_utc(now).timestamp() * 1000)
    return f"{timestamp}-{secrets.token_hex(8)}-{safe_name}"


def is_allowed_type(content_type: str) -> bool:
    base = content_type.split(";", 1)[0].strip().lower()
    return base in ALLOWED_TYPES or base.startswith("application/")


class UploadService:
    def __init__(
        self,
        files: FilesRepository,
        rate_limiter: RateLimiter,
        store: ObjectStore,
        clock: Callable[[], datetime] = utcnow,
        max_file_size: int = MAX_FILE_SIZE,
    ):
        self.files = files
        self.rate_limiter = rate_limiter
        self.store = store
        self.clock = clock
        self.max_file_size = max_file_size

    def generate_file_id(self) -> str:
        """Generate a unique share id for the upload."""
        while True:
            file_id = secrets.token_urlsafe(16)
            if not self.files.id_exists(file_id):
                return file_id

    def validate(
        self,
        size: int,
        filename: str,
        content_type: str,
        password: str | None = None,
    ) -> str:
        """Reject bad input before any external call. Returns the effective content type."""
        if size > self.max_file_size:
            raise FileTooLarge(f"{size} bytes exceeds the {self.max_file_size} byte maximum")

        if not filename or not filename.strip():
            raise InvalidFilename("Empty filename")
        if len(filename) > MAX_FILENAME_LENGTH:
            raise InvalidFilename(f"Filename is {len(filename)} characters long")

        content_type = (content_type or "").strip() or DEFAULT_CONTENT_TYPE
        if not is_allowed_type(content_type):
            raise UnsupportedType(f"Content type {content_type!r} is not allowed")

        if password and not is_hashable(password.strip()):
            raise UnusablePassword("Password contains a NUL byte")
        return content_type

    def upload(
        self,
        data: bytes,
        filename: str,
        content_type: str | None,
        origin_id: str,
        password: str | None = None,
        declared_size: int | None = None,
    ) -> UploadResult:
        size = max(len(data), declared_size or 0)
        content_type = self.validate(size, filename, content_type, password)

        admission = self.rate_limiter.admit(origin_id)
        if not admission.allowed:
            raise RateLimited(f"Origin {origin_id} is over its daily quota")

        # Hashed before the blob is written so a refused password leaves nothing behind
        password_hash = None
        if password and password.strip():
            try:
                password_hash = hash_password(password.strip())
            except ValueError as e:
                raise UnusablePassword(str(e)) from e

        now = as_utc(self.clock())
        object_key = generate_object_key(filename, now)

        try:
            self.store.put(object_key, data, content_type)
        except ObjectStoreError as e:
            logger.error(f"[Upload] Storage write failed for {object_key}: {e}")
            raise StorageWriteFailed(str(e)) from e

        try:
            record = self.files.create(
                file_id=self.generate_file_id(),
                original_filename=filename,
                object_key=object_key,
                file_size=len(data),
                content_type=content_type,
                created_at=now,
                expires_at=compute_expiry(now),
                password_hash=password_hash,
                uploader_ip=origin_id,
            )
        except SQLAlchemyError as e:
            # The blob stays behind; the JSON log is the reconciliation trail.
            logger.error(
                f"[Upload] Metadata write failed, orphaned blob left in storage: "
                f"object_key={object_key} size={len(data)} error={e}"
            )
            raise MetadataWriteFailed(str(e)) from e

        logger.info(f"[Upload] Stored {record.id} as {object_key} ({len(data)} bytes)")
        return UploadResult(record=record, remaining_uploads=admission.remaining)
