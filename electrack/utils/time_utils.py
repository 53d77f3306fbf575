"""
Time utility functions for day boundaries and time zone presentation.
All stored instants are UTC; zones only matter when rendering results.
"""

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Callable, Optional, Tuple

import pytz

from electrack.models.price import PriceWindow

Clock = Callable[[], datetime]

END_OF_HOUR = timedelta(minutes=59, seconds=59)


def utc_now() -> datetime:
    """Current instant in UTC."""
    return datetime.now(timezone.utc)


def utc_today(clock: Optional[Clock] = None) -> date:
    """
    Calendar date of the current instant, on the UTC day boundary used by the store.
    """
    now = (clock or utc_now)()
    return now.astimezone(timezone.utc).date()


def end_of_hour(moment: datetime) -> datetime:
    """Last second of the hour starting at ``moment``."""
    return moment + END_OF_HOUR


def utc_day_bounds(day: date) -> Tuple[datetime, datetime]:
    """
    First and last second of a UTC calendar day.

    Examples:
        - 2024-01-01 -> (2024-01-01T00:00:00Z, 2024-01-01T23:59:59Z)
    """
    start = datetime.combine(day, time(0, 0, 0), tzinfo=timezone.utc)
    end = datetime.combine(day, time(23, 59, 59), tzinfo=timezone.utc)
    return start, end


def resolve_timezone(name: str) -> tzinfo:
    """
    Look up an IANA time zone by name.

    Raises:
        ValueError: If the zone name is unknown
    """
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError as e:
        raise ValueError(f"Unknown time zone '{name}'") from e


def project_window(window: PriceWindow, zone: tzinfo) -> PriceWindow:
    """
    Express a UTC-anchored window in ``zone`` for display.

    The instants are unchanged, only their offset differs, so converting the
    result back to UTC yields the original window. The average price is zone
    independent and passed through as is.
    """
    return window.with_timezone(zone)
