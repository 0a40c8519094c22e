"""
Activity history queries

History is append-only and stored newest-first. Grouping is by the entry's
stored calendar `date`, never by its timestamp, so activity logged near
midnight stays on the day it was logged.
"""

from collections import defaultdict
from datetime import date
from typing import Iterable, Optional

from questboard.models.activity import ActivityEntry


def total_for_date(history: Iterable[ActivityEntry], day: date) -> int:
    """Sum of points logged on `day`"""
    return sum(entry.points for entry in history if entry.date == day)


def totals_by_date(history: Iterable[ActivityEntry]) -> dict[date, int]:
    """Points per calendar day"""
    totals: dict[date, int] = defaultdict(int)
    for entry in history:
        totals[entry.date] += entry.points
    return dict(totals)


def total_for_last_n_days(
    history: Iterable[ActivityEntry],
    n: int,
    as_of: Optional[date] = None
) -> int:
    """
    Sum of points over the last `n` distinct active days

    Counts days that have activity, not a calendar window: a profile active on
    3 of the last 7 days sums those 3 days for n=7, and older active days fill
    the remaining slots.

    Args:
        history: Activity entries (any order)
        n: Number of distinct active days to include
        as_of: Ignore days after this date
    """
    if n <= 0:
        return 0

    totals = totals_by_date(history)
    days = sorted(d for d in totals if as_of is None or d <= as_of)
    return sum(totals[d] for d in days[-n:])


def entries_for_date(history: Iterable[ActivityEntry], day: date) -> list[ActivityEntry]:
    """Entries logged on `day`, newest first"""
    return sort_newest_first(entry for entry in history if entry.date == day)


def sort_newest_first(history: Iterable[ActivityEntry]) -> list[ActivityEntry]:
    return sorted(history, key=lambda entry: entry.timestamp, reverse=True)


def goal_progress(total: int, daily_goal: int) -> int:
    """Percent of the daily goal reached, clamped to 0..100"""
    if daily_goal <= 0:
        return 100
    return max(0, min(100, round(total / daily_goal * 100)))
