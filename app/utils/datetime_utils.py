"""
Timezone-aware datetime helpers.
- Store and compute in UTC in DB.
- API responses expose datetimes as ISO-8601 with an explicit offset.
"""
from datetime import date, datetime, timedelta, timezone
from typing import Optional

UTC = timezone.utc


def now_utc() -> datetime:
    """Current time in UTC (timezone-aware). Use for created_at, last_updated, approved_at, etc."""
    return datetime.now(UTC)


def today_utc() -> date:
    """Today's calendar date in UTC; batch jobs compare date columns against this."""
    return now_utc().date()


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """If dt is naive, treat as UTC and return timezone-aware UTC. If already aware, convert to UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def iso_utc(dt: Optional[datetime]) -> Optional[str]:
    """Serialize as ISO-8601 in UTC (+00:00). SQLite hands back naive datetimes; those are UTC."""
    if dt is None:
        return None
    return ensure_utc(dt).isoformat()


def inclusive_days(start: date, end: date) -> int:
    """Number of calendar days from start to end, both included. 0 when end precedes start."""
    if end < start:
        return 0
    return (end - start).days + 1


def add_days(d: date, days: int) -> date:
    return d + timedelta(days=days)
