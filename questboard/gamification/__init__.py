"""
Gamification engine for QuestBoard

- XP and leveling (linear per-level cost)
- Daily-goal streaks
- Activity history queries
- Badges
- Leaderboard aggregation
"""

from questboard.gamification.progression import (
    apply_completion,
    level_cost,
    level_progress,
    LevelProgress,
)
from questboard.gamification.activity_log import (
    total_for_date,
    total_for_last_n_days,
    entries_for_date,
    goal_progress,
)
from questboard.gamification.badges import evaluate_badges, Badge
from questboard.gamification.leaderboard import (
    aggregate_leaderboard,
    range_start,
)

__all__ = [
    "apply_completion",
    "level_cost",
    "level_progress",
    "LevelProgress",
    "total_for_date",
    "total_for_last_n_days",
    "entries_for_date",
    "goal_progress",
    "evaluate_badges",
    "Badge",
    "aggregate_leaderboard",
    "range_start",
]
