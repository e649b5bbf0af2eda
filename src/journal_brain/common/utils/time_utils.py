# datetime helpers, every timestamp inside the service is timezone-aware UTC

import calendar
from datetime import datetime, timezone
from typing import Optional

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def ensure_utc(value: datetime) -> datetime:
    """Naive datetimes are interpreted as UTC, aware ones are converted."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite stores DateTime without offsets, so rows are written/compared as naive UTC."""
    if value is None:
        return None
    return ensure_utc(value).replace(tzinfo=None)

def isoformat(value: datetime) -> str:
    """ISO-8601 with a trailing Z, the format tool payloads use."""
    return ensure_utc(value).strftime("%Y-%m-%dT%H:%M:%SZ")

def month_period(year: int, month: int) -> tuple[datetime, datetime]:
    """First and last instant (UTC) of a calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    end = datetime(year, month, last_day, 23, 59, 59, 999999, tzinfo=timezone.utc)
    return start, end

def year_period(year: int) -> tuple[datetime, datetime]:
    start = datetime(year, 1, 1, tzinfo=timezone.utc)
    end = datetime(year, 12, 31, 23, 59, 59, 999999, tzinfo=timezone.utc)
    return start, end
