from concurrent.futures import ThreadPoolExecutor
from datetime import date
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from sharelink.api.ratelimit.repositories.rate_limit_repository import RateLimitRepository
from sharelink.api.ratelimit.services.rate_limiter import RateLimiter


def test_uploads_up_to_the_limit_are_admitted(rate_limit_repository, clock):
    limiter = RateLimiter(rate_limit_repository, limit=3, clock=clock)

    results = [limiter.admit("10.0.0.1") for _ in range(3)]

    assert [r.allowed for r in results] == [True, True, True]
    assert [r.remaining for r in results] == [2, 1, 0]


def test_upload_past_the_limit_is_denied(rate_limit_repository, clock):
    limiter = RateLimiter(rate_limit_repository, limit=3, clock=clock)
    for _ in range(3):
        limiter.admit("10.0.0.1")

    denied = limiter.admit("10.0.0.1")

    assert not denied.allowed
    assert denied.remaining == 0
    assert rate_limit_repository.get("10.0.0.1").upload_count == 3


def test_counter_resets_on_the_next_day(rate_limit_repository, clock):
    limiter = RateLimiter(rate_limit_repository, limit=3, clock=clock)
    for _ in range(4):
        limiter.admit("10.0.0.1")

    clock.advance(days=1)
    admission = limiter.admit("10.0.0.1")

    assert admission.allowed
    assert admission.remaining == 2
    counter = rate_limit_repository.get("10.0.0.1")
    assert counter.upload_count == 1
    assert counter.last_upload_date == date(2026, 3, 15)


def test_origins_are_counted_separately(rate_limit_repository, clock):
    limiter = RateLimiter(rate_limit_repository, limit=1, clock=clock)

    assert limiter.admit("10.0.0.1").allowed
    assert not limiter.admit("10.0.0.1").allowed
    assert limiter.admit("10.0.0.2").allowed


def test_limit_is_configurable(rate_limit_repository, clock):
    limiter = RateLimiter(rate_limit_repository, limit=15, clock=clock)

    results = [limiter.admit("10.0.0.1") for _ in range(16)]

    assert sum(r.allowed for r in results) == 15
    assert results[0].remaining == 14
    assert not results[-1].allowed


def test_limit_must_be_positive(rate_limit_repository):
    with pytest.raises(ValueError):
        RateLimiter(rate_limit_repository, limit=0)


def test_store_failure_fails_open(clock):
    repository = MagicMock(spec=RateLimitRepository)
    repository.increment_within_limit.side_effect = OperationalError("UPDATE", {}, Exception("db down"))
    limiter = RateLimiter(repository, limit=10, clock=clock)

    admission = limiter.admit("10.0.0.1")

    assert admission.allowed
    assert admission.remaining == 10


def test_concurrent_admissions_never_exceed_the_quota(rate_limit_repository, clock):
    limiter = RateLimiter(rate_limit_repository, limit=5, clock=clock)
    limiter.admit("10.0.0.1")  # remaining: 4

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: limiter.admit("10.0.0.1"), range(12)))

    assert sum(r.allowed for r in results) == 4
    assert rate_limit_repository.get("10.0.0.1").upload_count == 5


def test_concurrent_first_uploads_from_a_new_origin(rate_limit_repository, clock):
    limiter = RateLimiter(rate_limit_repository, limit=3, clock=clock)

    with ThreadPoolExecutor(max_workers=6) as pool:
        results = list(pool.map(lambda _: limiter.admit("10.9.9.9"), range(6)))

    assert sum(r.allowed for r in results) == 3
    assert rate_limit_repository.get("10.9.9.9").upload_count == 3


def _replay(*results):
    """A session whose statements return ``results`` in order."""
    session = MagicMock()
    session.execute.side_effect = list(results)
    return session


def test_reset_lost_to_a_concurrent_rollover_is_retried(rate_limit_repository):
    day = date(2026, 3, 14)
    # Another request reset yesterday's counter to 1 between our two updates
    session = _replay(
        MagicMock(rowcount=0),
        MagicMock(rowcount=0),
        MagicMock(**{"first.return_value": SimpleNamespace(upload_count=1, last_upload_date=day)}),
        MagicMock(rowcount=1),
    )
    session.scalar.return_value = 2

    assert rate_limit_repository._increment(session, "10.0.0.1", day, 3) == 2
    session.add.assert_not_called()


def test_full_counter_for_today_is_denied_without_retry(rate_limit_repository):
    day = date(2026, 3, 14)
    session = _replay(
        MagicMock(rowcount=0),
        MagicMock(rowcount=0),
        MagicMock(**{"first.return_value": SimpleNamespace(upload_count=3, last_upload_date=day)}),
    )

    assert rate_limit_repository._increment(session, "10.0.0.1", day, 3) is None
    assert session.execute.call_count == 3
