"""
Calendar Utilities

Pure helpers that map timestamps onto local calendar days. Every streak,
series and recurrence computation is built on these, so "a day studied"
means the same thing everywhere.

Semantics:
- Aware datetimes are converted to settings.LOCAL_TIMEZONE before the date
  is taken; naive datetimes are treated as already local.
- Weekday indices run Sunday=0 .. Saturday=6.
- Day keys are ISO strings (YYYY-MM-DD), which sort chronologically.

Usage:
    from study_tracker.services.analytics.calendar import date_key, days_between

    date_key(session.start_time)          # "2025-03-14"
    days_between("2025-03-12", "2025-03-14")  # 2
"""

from datetime import date, datetime, timedelta
from functools import lru_cache
from typing import Iterator, Optional, Union
from zoneinfo import ZoneInfo

from study_tracker.config import settings

DateLike = Union[date, str]


@lru_cache()
def local_zone(name: Optional[str] = None) -> ZoneInfo:
    """Return the configured local zone (cached per name)."""
    return ZoneInfo(name or settings.LOCAL_TIMEZONE)


def to_local(value: datetime) -> datetime:
    """Convert an aware datetime into the local zone; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone(local_zone())


def as_local(value: datetime) -> datetime:
    """Aware datetime in the local zone; naive values are taken as local wall time."""
    if value.tzinfo is None:
        return value.replace(tzinfo=local_zone())
    return value.astimezone(local_zone())


def local_date(value: Optional[datetime]) -> Optional[date]:
    """Local calendar date of a timestamp, or None for a missing timestamp."""
    if value is None:
        return None
    return to_local(value).date()


def date_key(value: Optional[Union[datetime, date]]) -> Optional[str]:
    """
    Map a timestamp to its local calendar-day key.

    Two timestamps on the same local day produce the same key. A missing
    timestamp produces None so callers can skip it.

    Args:
        value: Timestamp (or already a date).

    Returns:
        "YYYY-MM-DD" or None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_local(value).date().isoformat()
    return value.isoformat()


def parse_key(value: DateLike) -> date:
    """Accept either a date or a YYYY-MM-DD key and return a date."""
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def days_between(a: DateLike, b: DateLike) -> int:
    """
    Whole-day difference between two calendar days (b - a).

    Args:
        a: Earlier day (key or date).
        b: Later day (key or date).

    Returns:
        Number of calendar days from a to b; negative if b precedes a.
    """
    return (parse_key(b) - parse_key(a)).days


def day_of_week(value: Union[datetime, date]) -> int:
    """Weekday index with Sunday=0 .. Saturday=6."""
    if isinstance(value, datetime):
        value = to_local(value).date()
    # date.weekday() is Monday=0 .. Sunday=6
    return (value.weekday() + 1) % 7


def date_range(start: date, end: date) -> Iterator[date]:
    """Yield every calendar date from start through end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def local_today(now: Optional[datetime] = None) -> date:
    """Local calendar date of `now` (wall clock when omitted)."""
    if now is None:
        now = datetime.now(local_zone())
    return to_local(now).date()


def start_of_day(now: datetime) -> datetime:
    """Local midnight of the day containing `now`."""
    return to_local(now).replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(now: datetime) -> datetime:
    """Local midnight of the Sunday that starts the week containing `now`."""
    midnight = start_of_day(now)
    return midnight - timedelta(days=day_of_week(midnight.date()))


def start_of_month(now: datetime) -> datetime:
    """Local midnight of the first day of the month containing `now`."""
    return start_of_day(now).replace(day=1)


def hour_of_day(value: datetime) -> int:
    """Local hour (0-23) of a timestamp."""
    return to_local(value).hour
