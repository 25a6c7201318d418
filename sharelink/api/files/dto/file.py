"""File Data Transfer Objects."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

FileStatus = Literal["all", "active", "expired"]


class FileDTO(BaseModel):
    """Full record as held by the metadata store. Never sent to anonymous callers."""

    id: str
    original_filename: str
    object_key: str
    password_hash: str | None = None
    file_size: int
    content_type: str
    download_count: int
    is_active: bool
    uploader_ip: str
    created_at: datetime
    expires_at: datetime


class FileResponse(BaseModel):
    """Admin view of a file."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    original_filename: str
    object_key: str
    file_size: int
    content_type: str
    download_count: int
    is_active: bool
    is_live: bool
    has_password: bool
    uploader_ip: str
    created_at: datetime
    expires_at: datetime


class FileStatsResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_files: int
    active_files: int
    total_size: int
    total_downloads: int
