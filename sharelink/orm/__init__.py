"""Central ORM module — imports all models for Alembic metadata discovery."""

from sharelink.api.files.orm import FileModel
from sharelink.api.ratelimit.orm import RateLimitModel

__all__ = [
    "FileModel",
    "RateLimitModel",
]
