"""Aggregate reading statistics over a user's progress records."""

from dataclasses import dataclass
from typing import Iterable

from ..db.schemas import MINUTES_PER_PAGE, ReadingStatus
from ..utils import round_half_up


@dataclass
class AggregateStats:
    """Lifetime totals for one user."""

    total_pages_read: int = 0
    total_reading_minutes: int = 0
    total_reading_hours: float = 0.0  # unrounded
    average_reading_speed: int = 0  # pages per hour
    books_completed_total: int = 0
    books_reading_total: int = 0
    books_want_to_read_total: int = 0


def compute_aggregate_stats(records: Iterable) -> AggregateStats:
    """Compute totals from progress records.

    Args:
        records: Progress records (anything with ``pages_read`` and ``status``)

    Returns:
        AggregateStats
    """
    records = list(records)

    total_pages = sum(record.pages_read or 0 for record in records)
    total_minutes = total_pages * MINUTES_PER_PAGE
    total_hours = total_minutes / 60

    if total_hours > 0:
        speed = round_half_up(total_pages / total_hours)
    else:
        speed = 0

    statuses = [ReadingStatus(record.status) for record in records]

    return AggregateStats(
        total_pages_read=total_pages,
        total_reading_minutes=total_minutes,
        total_reading_hours=total_hours,
        average_reading_speed=speed,
        books_completed_total=statuses.count(ReadingStatus.COMPLETED),
        books_reading_total=statuses.count(ReadingStatus.READING),
        books_want_to_read_total=statuses.count(ReadingStatus.WANT_TO_READ),
    )
