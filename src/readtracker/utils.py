"""Small date and number helpers shared by the stats modules."""

import math
from datetime import date, datetime, time
from typing import Optional, Union


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives.

    Example:
        >>> round_half_up(2.5)
        3
        >>> round(2.5)
        2
    """
    return int(math.floor(value + 0.5))


def start_of_day(moment: datetime) -> datetime:
    """Truncate a datetime to midnight of the same calendar day."""
    return datetime.combine(moment.date(), time.min, tzinfo=moment.tzinfo)


def to_calendar_day(value: Union[date, datetime]) -> date:
    """Calendar day of a date or datetime."""
    if isinstance(value, datetime):
        return value.date()
    return value


def resolve_today(today: Optional[Union[date, datetime]] = None) -> date:
    """Return ``today`` as a date, defaulting to the local current day."""
    if today is None:
        return date.today()
    return to_calendar_day(today)
