"""Expiry and liveness rules.

A file is live while it is active and its expiry has not been reached.
Liveness is always derived from ``expires_at`` at read time; nothing ever
flips a stored flag when a file expires.
"""

from datetime import date, datetime, timedelta, timezone

RETENTION = timedelta(days=3)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """SQLite hands datetimes back without tzinfo; they were stored as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def compute_expiry(created_at: datetime) -> datetime:
    return as_utc(created_at) + RETENTION


def is_expired(expires_at: datetime, now: datetime) -> bool:
    return as_utc(now) >= as_utc(expires_at)


def is_live(is_active: bool, expires_at: datetime, now: datetime) -> bool:
    return bool(is_active) and not is_expired(expires_at, now)


def today(now: datetime) -> date:
    """Calendar day (UTC) used to bucket upload counters."""
    return as_utc(now).date()
