"""Reading statistics and goals."""

from .aggregate import AggregateStats, compute_aggregate_stats
from .engine import ReadingStatsEngine, ReadingSummary
from .goals import (
    GoalTracker,
    WeeklyGoalStatus,
    calculate_daily_target,
    compute_weekly_goal_progress,
    days_left_in_week,
    end_of_week,
    start_of_week,
)

__all__ = [
    "AggregateStats",
    "compute_aggregate_stats",
    "ReadingStatsEngine",
    "ReadingSummary",
    "GoalTracker",
    "WeeklyGoalStatus",
    "calculate_daily_target",
    "compute_weekly_goal_progress",
    "days_left_in_week",
    "end_of_week",
    "start_of_week",
]
