"""Date/datetime normalization helpers"""

from datetime import date, datetime, timezone
from typing import Any, Optional


def as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_date(value: Any) -> Optional[date]:
    """date part of a date/datetime, None for anything else"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


def timestamp_or_epoch(value: Any) -> float:
    """POSIX timestamp of a datetime; 0 for missing or non-datetime values"""
    if isinstance(value, datetime):
        return as_utc(value).timestamp()
    return 0.0
