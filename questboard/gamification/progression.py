"""
XP, Leveling and Streak Progression

Pure functions, no I/O. Every quest completion flows through
apply_completion(), which returns a new ProfileState.

Leveling Curve:
- cost(level) = 100 + (level - 1) * 75 XP to advance from `level`
- Level 1 -> 2: 100 XP, 2 -> 3: 175 XP, 3 -> 4: 250 XP, ...
- Level L is reached at sum(cost(1..L-1)) total XP

Streak Rules:
- A day counts once its point total reaches settings.daily_goal
- Goal met the day after the last goal day: streak + 1
- Goal met after a gap (or for the first time): streak resets to 1
- Further completions on a day already counted change nothing
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional
from uuid import uuid4
import logging

from questboard.gamification.activity_log import total_for_date
from questboard.models.activity import ActivityEntry
from questboard.models.profile import ProfileState
from questboard.models.quest import Quest
from questboard.utils.datetime_helpers import now_utc, yesterday

logger = logging.getLogger(__name__)

BASE_LEVEL_COST = 100
LEVEL_COST_INCREMENT = 75


@dataclass(frozen=True)
class LevelProgress:
    """Where a total XP value sits on the leveling curve"""
    level: int
    xp_into_level: int
    xp_for_next_level: int
    xp_to_next_level: int


def level_cost(level: int) -> int:
    """XP needed to advance from `level` to `level + 1`"""
    return BASE_LEVEL_COST + (level - 1) * LEVEL_COST_INCREMENT


def level_threshold(level: int) -> int:
    """Total XP at which `level` is reached"""
    # Arithmetic series: sum of cost(1..level-1)
    n = level - 1
    return n * BASE_LEVEL_COST + LEVEL_COST_INCREMENT * n * (n - 1) // 2


def advance_level(level: int, xp: int) -> int:
    """
    Advance from the current level until total XP no longer covers the next cost

    Starts from `level` rather than from 1, so the remainder is the XP earned
    past the current level's threshold.
    """
    remainder = xp - level_threshold(level)
    while remainder >= level_cost(level):
        remainder -= level_cost(level)
        level += 1
    return level


def level_progress(total_xp: int) -> LevelProgress:
    """
    Calculate level and progress from total XP, starting at level 1

    Returns:
        LevelProgress with the level, XP earned inside it, the level's cost
        and the XP still missing for the next level
    """
    level = advance_level(1, total_xp)
    xp_into_level = total_xp - level_threshold(level)
    cost = level_cost(level)
    return LevelProgress(
        level=level,
        xp_into_level=xp_into_level,
        xp_for_next_level=cost,
        xp_to_next_level=cost - xp_into_level,
    )


def update_streak(
    streak: int,
    last_goal_date: Optional[date],
    total_today: int,
    daily_goal: int,
    today: date
) -> tuple[int, Optional[date]]:
    """
    Apply the daily-goal streak rule

    Returns:
        (streak, last_goal_date) after today's total is taken into account
    """
    if total_today < daily_goal or last_goal_date == today:
        return streak, last_goal_date

    if last_goal_date == yesterday(today):
        return streak + 1, today
    return 1, today


def apply_completion(
    state: ProfileState,
    quest: Quest,
    today: date,
    now: Optional[datetime] = None
) -> ProfileState:
    """
    Record a quest completion and recompute the derived counters

    Args:
        state: Current profile state (not mutated)
        quest: Completed quest
        today: Calendar day the completion is logged on
        now: Completion instant (defaults to current UTC time)

    Returns:
        New ProfileState with history, xp, level, streak and
        last_goal_date updated
    """
    entry = ActivityEntry(
        id=uuid4().hex,
        date=today,
        quest_id=quest.id,
        title=quest.title,
        points=quest.points,
        category=quest.category,
        icon=quest.icon,
        timestamp=now or now_utc(),
    )
    history = [entry, *state.history]
    xp = state.xp + quest.points
    level = advance_level(state.level, xp)

    streak, last_goal_date = update_streak(
        streak=state.streak,
        last_goal_date=state.last_goal_date,
        total_today=total_for_date(history, today),
        daily_goal=state.settings.daily_goal,
        today=today,
    )

    if level > state.level:
        logger.info(f"{state.name or 'Profile'} leveled up from {state.level} to {level}")
    if streak != state.streak:
        logger.info(f"{state.name or 'Profile'} streak {state.streak} -> {streak} days")

    return state.model_copy(update={
        "history": history,
        "xp": xp,
        "level": level,
        "streak": streak,
        "last_goal_date": last_goal_date,
    })
