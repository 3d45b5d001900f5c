"""Reading statistics engine.

Combines aggregate stats, streaks and weekly goal progress for one user.
The computations are pure functions over already-fetched records; the
engine only adds the fetch step.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from ..db.models import WeeklyGoal
from ..db.sqlite import Database
from ..streaks.calculator import compute_longest_streak, compute_streak
from .aggregate import AggregateStats, compute_aggregate_stats
from .goals import WeeklyGoalStatus, compute_weekly_goal_progress

logger = logging.getLogger(__name__)


@dataclass
class ReadingSummary:
    """Everything the stats view shows for a user."""

    aggregate: AggregateStats
    current_streak: int
    longest_streak: int
    weekly_goal: WeeklyGoalStatus
    has_custom_goal: bool


class ReadingStatsEngine:
    """Computes reading statistics for a user."""

    compute_aggregate_stats = staticmethod(compute_aggregate_stats)
    compute_streak = staticmethod(compute_streak)
    compute_weekly_goal_progress = staticmethod(compute_weekly_goal_progress)

    def __init__(self, db: Database):
        """Initialize the engine.

        Args:
            db: Database instance
        """
        self.db = db

    @staticmethod
    def summarize(
        records: Iterable,
        goal: Optional[WeeklyGoal] = None,
        now: Optional[datetime] = None,
    ) -> ReadingSummary:
        """Build a summary from records already in memory."""
        if now is None:
            now = datetime.now()
        records = list(records)

        return ReadingSummary(
            aggregate=compute_aggregate_stats(records),
            current_streak=compute_streak(records, now),
            longest_streak=compute_longest_streak(records),
            weekly_goal=compute_weekly_goal_progress(records, goal, now),
            has_custom_goal=goal is not None,
        )

    def get_summary(self, user_id: str, now: Optional[datetime] = None) -> ReadingSummary:
        """Fetch a user's records and goal and summarize them.

        Args:
            user_id: User ID
            now: Reference time (default: now)

        Returns:
            ReadingSummary
        """
        records = self.db.get_progress_for_user(user_id)
        goal = self.db.get_goal(user_id)
        summary = self.summarize(records, goal, now)

        logger.debug(
            "Summary for %s: %d records, %d pages, streak %d",
            user_id,
            len(records),
            summary.aggregate.total_pages_read,
            summary.current_streak,
        )
        return summary
