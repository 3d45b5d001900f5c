"""Daily reading streak calculation.

A streak is the number of consecutive calendar days with at least one
progress update, ending today or yesterday. The only input is the
``last_read_date`` of each progress record, a naive local datetime.
"""

from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Union

from ..utils import resolve_today, to_calendar_day


def reading_days(records: Iterable) -> list[date]:
    """Distinct calendar days with a progress update, most recent first."""
    days = {
        to_calendar_day(record.last_read_date)
        for record in records
        if record.last_read_date is not None
    }
    return sorted(days, reverse=True)


def compute_streak(
    records: Iterable,
    today: Optional[Union[date, datetime]] = None,
) -> int:
    """Calculate the current daily reading streak.

    Records updated on the same day count once.

    Args:
        records: Progress records (anything with ``last_read_date``)
        today: Reference day (default: local today)

    Returns:
        Streak length in days, 0 if the last read was before yesterday
    """
    days = reading_days(records)
    if not days:
        return 0

    today = resolve_today(today)
    most_recent = days[0]
    if most_recent != today and most_recent != today - timedelta(days=1):
        return 0

    streak = 1
    for previous, current in zip(days, days[1:]):
        if previous - current != timedelta(days=1):
            break
        streak += 1

    return streak


def compute_longest_streak(records: Iterable) -> int:
    """Longest run of consecutive reading days anywhere in the history."""
    days = sorted(reading_days(records))
    if not days:
        return 0

    longest = 1
    current_run = 1
    for i in range(1, len(days)):
        if days[i] - days[i - 1] == timedelta(days=1):
            current_run += 1
            longest = max(longest, current_run)
        else:
            current_run = 1

    return longest
