"""Upload Data Transfer Objects."""

from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from sharelink.api.files.dto.file import FileDTO


@dataclass(frozen=True)
class UploadResult:
    record: FileDTO
    remaining_uploads: int


class UploadResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    file_id: str
    download_url: str
    filename: str
    size: int
    expires_at: datetime
    remaining_uploads: int
