"""Rate limit repository — data access layer."""

from datetime import date

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from sharelink.api.ratelimit.dto.rate_limit import RateLimitDTO
from sharelink.api.ratelimit.orm.rate_limit_model import RateLimitModel

# A concurrent first upload from the same origin can win the INSERT race;
# the loser simply starts over against the row that now exists.
MAX_INSERT_ATTEMPTS = 3

# Under READ COMMITTED a day-rollover reset can land between our statements;
# each pass re-reads the row, and a pass that cannot settle denies.
MAX_STEP_PASSES = 3


class RateLimitRepository:
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def _get_session(self):
        return self._session_factory()

    def get(self, origin_id: str) -> RateLimitDTO | None:
        with self._get_session() as session:
            model = session.get(RateLimitModel, origin_id)
            if not model:
                return None
            return RateLimitDTO(
                origin_id=model.origin_id,
                upload_count=model.upload_count,
                last_upload_date=model.last_upload_date,
            )

    def increment_within_limit(self, origin_id: str, day: date, limit: int) -> int | None:
        """Count one upload for ``origin_id`` on ``day`` unless it is at ``limit``.

        Returns the new count, or None when the origin already used its quota
        for ``day``. Every write is a single conditional UPDATE/INSERT, so two
        callers racing on the same origin cannot both slip past the ceiling.
        """
        for attempt in range(1, MAX_INSERT_ATTEMPTS + 1):
            with self._get_session() as session:
                try:
                    count = self._increment(session, origin_id, day, limit)
                    session.commit()
                    return count
                except IntegrityError:
                    session.rollback()
                    if attempt == MAX_INSERT_ATTEMPTS:
                        raise

    def _increment(self, session, origin_id: str, day: date, limit: int) -> int | None:
        for _ in range(MAX_STEP_PASSES):
            # Same day, still below the ceiling
            result = session.execute(
                update(RateLimitModel)
                .where(
                    RateLimitModel.origin_id == origin_id,
                    RateLimitModel.last_upload_date == day,
                    RateLimitModel.upload_count < limit,
                )
                .values(upload_count=RateLimitModel.upload_count + 1)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 1:
                return session.scalar(
                    select(RateLimitModel.upload_count).where(RateLimitModel.origin_id == origin_id)
                )

            # Counter left over from an earlier day: restart at 1
            result = session.execute(
                update(RateLimitModel)
                .where(
                    RateLimitModel.origin_id == origin_id,
                    RateLimitModel.last_upload_date != day,
                )
                .values(upload_count=1, last_upload_date=day)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 1:
                return 1

            current = session.execute(
                select(RateLimitModel.upload_count, RateLimitModel.last_upload_date)
                .where(RateLimitModel.origin_id == origin_id)
            ).first()
            if current is None:
                session.add(RateLimitModel(origin_id=origin_id, upload_count=1, last_upload_date=day))
                session.flush()
                return 1
            if current.last_upload_date == day and current.upload_count >= limit:
                return None
            # Another request moved the row between statements; go again

        return None
