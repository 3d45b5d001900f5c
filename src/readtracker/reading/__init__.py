"""Reading progress management."""

from .progress import (
    ProgressTracker,
    calculate_daily_target,
    calculate_pages_left,
    calculate_reading_progress,
    update_progress,
)

__all__ = [
    "ProgressTracker",
    "calculate_daily_target",
    "calculate_pages_left",
    "calculate_reading_progress",
    "update_progress",
]
