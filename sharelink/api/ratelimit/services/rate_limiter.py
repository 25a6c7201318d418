"""Rate limiter — per-origin daily upload quota.

The origin identifier comes from forwarded headers that any client can set,
so this is an abuse deterrent, not a security boundary.
"""

from datetime import datetime
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError

from sharelink.api.ratelimit.dto.rate_limit import Admission
from sharelink.api.ratelimit.repositories.rate_limit_repository import RateLimitRepository
from sharelink.config import UPLOAD_LIMIT_PER_DAY
from sharelink.lifecycle import today, utcnow
from sharelink.logger import logger


class RateLimiter:
    def __init__(
        self,
        repository: RateLimitRepository,
        limit: int = UPLOAD_LIMIT_PER_DAY,
        clock: Callable[[], datetime] = utcnow,
    ):
        if limit < 1:
            raise ValueError("Upload limit must be at least 1")
        self.repository = repository
        self.limit = limit
        self.clock = clock

    def admit(self, origin_id: str) -> Admission:
        """Count one upload for ``origin_id`` if today's quota allows it.

        A failing counter store lets the upload through: keeping the product
        available wins over strict quota enforcement.
        """
        try:
            count = self.repository.increment_within_limit(
                origin_id, today(self.clock()), self.limit
            )
        except SQLAlchemyError as e:
            logger.warning(f"[RateLimit] Counter store failed for {origin_id}, allowing upload: {e}")
            return Admission(allowed=True, remaining=self.limit)

        if count is None:
            logger.info(f"[RateLimit] Daily limit of {self.limit} reached for {origin_id}")
            return Admission(allowed=False, remaining=0)

        return Admission(allowed=True, remaining=max(self.limit - count, 0))
