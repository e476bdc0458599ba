"""Date helpers.

All timestamps are stored as naive UTC datetimes.
"""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Current time as a naive UTC datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def utc_midnight(value: datetime) -> datetime:
    """Truncate a naive UTC datetime to 00:00:00 of the same day."""
    return value.replace(hour=0, minute=0, second=0, microsecond=0)


def expiry_after_days(days: int, now: datetime = None) -> datetime:
    """UTC midnight of the day that falls ``days`` days after ``now``."""
    now = now or utc_now()
    return utc_midnight(now + timedelta(days=days))
