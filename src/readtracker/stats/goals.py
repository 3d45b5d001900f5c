"""Weekly reading goal tracking.

Weeks run Sunday 00:00 to Saturday 23:59:59.999 in local time. Each user has
at most one weekly pages goal, edited in place.
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

from pydantic import ValidationError as PydanticValidationError

from ..db.models import WeeklyGoal
from ..db.schemas import DEFAULT_PAGES_PER_WEEK, WeeklyGoalUpdate
from ..db.sqlite import Database
from ..errors import ValidationError
from ..utils import round_half_up, start_of_day

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)
END_OF_WEEK_OFFSET = timedelta(days=6, hours=23, minutes=59, seconds=59, milliseconds=999)


def start_of_week(now: datetime) -> datetime:
    """Most recent Sunday at 00:00:00.000 (``now`` itself if it is Sunday)."""
    days_since_sunday = (now.weekday() + 1) % 7  # Monday=0 ... Sunday=6
    return start_of_day(now) - timedelta(days=days_since_sunday)


def end_of_week(now: datetime) -> datetime:
    """Saturday 23:59:59.999 of the week containing ``now``."""
    return start_of_week(now) + END_OF_WEEK_OFFSET


def days_left_in_week(now: datetime) -> int:
    """Days until the end of the week, rounded up, never negative.

    Example: any time on a Wednesday, midnight included, gives 4.
    """
    remaining = end_of_week(now) - now
    # ceiling division on timedeltas
    return max(0, -(-remaining // ONE_DAY))


def calculate_daily_target(pages_left: int, days_left: int) -> int:
    """Pages per day needed to finish ``pages_left`` in ``days_left`` days."""
    if days_left <= 0:
        return 0
    return math.ceil(pages_left / days_left)


@dataclass
class WeeklyGoalStatus:
    """Progress toward the weekly pages goal."""

    goal_pages_per_week: int
    start_of_week: datetime
    end_of_week: datetime
    days_left_in_week: int
    pages_read_this_week: int
    progress_percentage: int
    pages_left: int
    daily_pages_needed: int

    @property
    def is_complete(self) -> bool:
        """Check if the goal has been reached."""
        return self.pages_left == 0


def compute_weekly_goal_progress(
    records: Iterable,
    goal: Optional[WeeklyGoal] = None,
    now: Optional[datetime] = None,
) -> WeeklyGoalStatus:
    """Compute this week's progress toward the pages goal.

    A record counts toward the week when its ``last_read_date`` falls inside
    the week, and it contributes its whole ``pages_read`` counter rather than
    the pages added this week. There is no per-day log to compute a delta
    from, so a book touched once this week counts in full.

    ``now`` and every ``last_read_date`` must be naive local datetimes;
    mixing in timezone-aware values raises ``TypeError``.

    Args:
        records: Progress records (anything with ``pages_read`` and ``last_read_date``)
        goal: The user's goal; None means the default of 60 pages
        now: Reference time (default: now, local)

    Returns:
        WeeklyGoalStatus
    """
    if now is None:
        now = datetime.now()

    if goal is not None and goal.pages_per_week is not None:
        goal_pages = goal.pages_per_week
    else:
        goal_pages = DEFAULT_PAGES_PER_WEEK

    week_start = start_of_week(now)
    week_end = week_start + END_OF_WEEK_OFFSET
    days_left = days_left_in_week(now)

    pages_this_week = sum(
        record.pages_read or 0
        for record in records
        if record.last_read_date is not None
        and week_start <= record.last_read_date <= week_end
    )

    if goal_pages > 0:
        percentage = min(100, round_half_up(pages_this_week / goal_pages * 100))
    else:
        percentage = 0

    pages_left = max(0, goal_pages - pages_this_week)

    return WeeklyGoalStatus(
        goal_pages_per_week=goal_pages,
        start_of_week=week_start,
        end_of_week=week_end,
        days_left_in_week=days_left,
        pages_read_this_week=pages_this_week,
        progress_percentage=percentage,
        pages_left=pages_left,
        daily_pages_needed=calculate_daily_target(pages_left, days_left),
    )


class GoalTracker:
    """Tracks and manages the weekly pages goal."""

    def __init__(self, db: Database):
        """Initialize goal tracker.

        Args:
            db: Database instance
        """
        self.db = db

    def get_weekly_goal(self, user_id: str) -> Optional[WeeklyGoal]:
        """Get the user's weekly goal, or None if it was never set."""
        return self.db.get_goal(user_id)

    def set_weekly_goal(
        self,
        user_id: str,
        pages_per_week: int,
        now: Optional[datetime] = None,
    ) -> WeeklyGoal:
        """Set the weekly pages goal.

        The goal is created on first use and updated in place afterwards.
        Every edit re-anchors ``week_start_date`` to the most recent Sunday.

        Args:
            user_id: Owner of the goal
            pages_per_week: Target, at least 1
            now: Time of the edit (default: now)

        Returns:
            The saved goal

        Raises:
            ValidationError: If pages_per_week is below 1
        """
        try:
            update = WeeklyGoalUpdate(pages_per_week=pages_per_week)
        except PydanticValidationError as e:
            raise ValidationError("Pages per week must be at least 1") from e

        if now is None:
            now = datetime.now()

        goal = self.db.get_goal(user_id)
        if goal is None:
            goal = WeeklyGoal(user_id=user_id)

        goal.pages_per_week = update.pages_per_week
        goal.week_start_date = start_of_week(now)
        goal.last_updated = now

        saved = self.db.save_goal(goal)
        logger.info(
            "Weekly goal for %s set to %d pages (week of %s)",
            user_id, saved.pages_per_week, saved.week_start_date.date().isoformat(),
        )
        return saved

    def get_status(self, user_id: str, now: Optional[datetime] = None) -> WeeklyGoalStatus:
        """Compute the user's weekly goal status from stored data."""
        records = self.db.get_progress_for_user(user_id)
        goal = self.db.get_goal(user_id)
        status = compute_weekly_goal_progress(records, goal, now)
        logger.debug(
            "Weekly status for %s: %d/%d pages",
            user_id, status.pages_read_this_week, status.goal_pages_per_week,
        )
        return status
