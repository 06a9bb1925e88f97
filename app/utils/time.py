"""Time utilities: UTC storage helpers and the restaurant's local clock.

Business timestamps (bill creation, expense dates, report windows, schedule
matching) are naive datetimes holding local wall-clock time in
``settings.TIMEZONE``. Auth bookkeeping uses naive UTC.
"""

from datetime import date, datetime, time, timezone
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo

from app.config import settings


def get_utc_now() -> datetime:
    """
    Returns a naive UTC datetime.
    Matches the existing DB schema (TIMESTAMP WITHOUT TIME ZONE).
    Avoids 'datetime.utcnow()' deprecation warnings.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


@lru_cache(maxsize=8)
def get_zone(name: Optional[str] = None) -> ZoneInfo:
    return ZoneInfo(name or settings.TIMEZONE)


def now_local(zone: Optional[ZoneInfo] = None) -> datetime:
    """Current wall-clock time in the restaurant zone (naive)."""
    zone = zone or get_zone()
    return datetime.now(zone).replace(tzinfo=None)


def to_local(instant: datetime, zone: Optional[ZoneInfo] = None) -> datetime:
    """
    Convert an absolute instant to local wall-clock time.

    Naive input is treated as UTC; aware input is converted from its own offset.
    """
    zone = zone or get_zone()
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(zone).replace(tzinfo=None)


def to_absolute(local_wallclock: datetime, zone: Optional[ZoneInfo] = None) -> datetime:
    """Inverse of ``to_local``: local wall-clock -> naive UTC."""
    zone = zone or get_zone()
    aware = local_wallclock.replace(tzinfo=zone)
    return aware.astimezone(timezone.utc).replace(tzinfo=None)


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def dotnet_weekday(moment: date) -> int:
    """Day of week with Sunday=0 .. Saturday=6 (the numbering the UI sends)."""
    return (moment.weekday() + 1) % 7
