"""Rate limit Data Transfer Objects."""

from dataclasses import dataclass
from datetime import date

from pydantic import BaseModel


class RateLimitDTO(BaseModel):
    origin_id: str
    upload_count: int
    last_upload_date: date


@dataclass(frozen=True)
class Admission:
    allowed: bool
    remaining: int
