"""Calendar windows in the local time zone.

All functions take timezone-aware datetimes and keep the tzinfo of their
input, so "start of day" and "N days back" are wall-clock arithmetic in
the zone the reference moment was taken in.
"""

from datetime import date, datetime, timedelta, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from aihealth.config import get_settings


def local_now(tz: Optional[ZoneInfo] = None) -> datetime:
    """Current moment in the configured local time zone."""
    return datetime.now(tz or get_settings().tz)


def start_of_day(moment: datetime) -> datetime:
    """Midnight of the calendar day containing ``moment``."""
    midnight = datetime.combine(moment.date(), datetime.min.time())
    return midnight.replace(tzinfo=moment.tzinfo)


def days_ago(moment: datetime, days: int) -> datetime:
    """Same wall-clock time ``days`` calendar days earlier."""
    return moment - timedelta(days=days)


def calendar_days_between(earlier: datetime, later: datetime) -> int:
    """Number of midnights crossed going from ``earlier`` to ``later``.

    ``earlier`` is first moved into ``later``'s zone so both dates are
    read from the same calendar.
    """
    if later.tzinfo is not None and earlier.tzinfo is not None:
        earlier = earlier.astimezone(later.tzinfo)
    return (later.date() - earlier.date()).days


def day_range(start: datetime, end: datetime) -> list[tuple[datetime, datetime]]:
    """Split [start, end) into per-calendar-day intervals.

    The first interval begins at ``start`` and the last ends at ``end``.
    """
    intervals = []
    cursor = start
    while cursor < end:
        next_midnight = start_of_day(cursor) + timedelta(days=1)
        intervals.append((cursor, min(next_midnight, end)))
        cursor = next_midnight
    return intervals


def day_key(moment: datetime, tz: Optional[tzinfo] = None) -> date:
    """Calendar date of a moment, read in ``tz`` when given."""
    if tz is not None and moment.tzinfo is not None:
        moment = moment.astimezone(tz)
    return moment.date()
