"""Database module for local SQLite storage."""

from .models import Book, ProgressRecord, Review, WeeklyGoal
from .schemas import (
    BookCreate,
    ProgressUpdate,
    ReadingStatus,
    ReviewCreate,
    WeeklyGoalUpdate,
)
from .sqlite import Database

__all__ = [
    "Book",
    "ProgressRecord",
    "Review",
    "WeeklyGoal",
    "BookCreate",
    "ProgressUpdate",
    "ReadingStatus",
    "ReviewCreate",
    "WeeklyGoalUpdate",
    "Database",
]
