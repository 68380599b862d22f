"""
Time helpers: hours until start, local hour-of-day, and time-range windows.
"""

from datetime import datetime, timedelta, timezone
from functools import lru_cache
from zoneinfo import ZoneInfo

from ..models.user import TimeRange

NOW_WINDOW = timedelta(minutes=30)
WITHIN_HOUR_WINDOW = timedelta(hours=1)


@lru_cache(maxsize=32)
def get_zone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def hours_until(start: datetime, now: datetime) -> float:
    """Hours from now until start (negative when already started)."""
    return (start - now).total_seconds() / 3600.0


def local_hour(moment: datetime, tz_name: str) -> int:
    """Hour of day (0-23) of moment in the named zone."""
    return moment.astimezone(get_zone(tz_name)).hour


def end_of_local_day(now: datetime, tz_name: str) -> datetime:
    local = now.astimezone(get_zone(tz_name))
    return local.replace(hour=23, minute=59, second=59, microsecond=999999)


def matches_time_range(start: datetime, time_range: TimeRange, now: datetime, tz_name: str) -> bool:
    """
    True when start falls inside the window named by time_range.

    NOW is the next 30 minutes, WITHIN_HOUR the next 60, TODAY until the end
    of the local day. NONE admits everything.
    """
    if time_range == TimeRange.NONE:
        return True
    if start < now:
        return False
    if time_range == TimeRange.NOW:
        return start - now <= NOW_WINDOW
    if time_range == TimeRange.WITHIN_HOUR:
        return start - now <= WITHIN_HOUR_WINDOW
    return start <= end_of_local_day(now, tz_name)
