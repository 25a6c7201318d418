"""Download Data Transfer Objects."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResolveRequest(_CamelModel):
    password: str | None = None


class ResolveByIdRequest(ResolveRequest):
    file_id: str


class ResolvedDownload(_CamelModel):
    signed_url: str
    filename: str


class FileInfo(_CamelModel):
    """What an anonymous recipient may learn about a live share."""

    id: str
    filename: str
    size: int
    content_type: str
    download_count: int
    expires_at: datetime
    password_required: bool
