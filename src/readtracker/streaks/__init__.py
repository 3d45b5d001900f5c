"""Reading streaks."""

from .calculator import compute_longest_streak, compute_streak, reading_days

__all__ = [
    "compute_longest_streak",
    "compute_streak",
    "reading_days",
]
