"""
Leaderboard aggregation

Totals are recomputed from the shared activity log on every query. Records
are filtered by ISO date string (zero-padded YYYY-MM-DD compares correctly
as text), grouped by name and sorted by points.
"""

import logging
from datetime import date, timedelta
from typing import Any, Iterable, Mapping

from questboard.models.activity import LeaderboardRow
from questboard.utils.datetime_helpers import subtract_months

logger = logging.getLogger(__name__)

ANONYMOUS_NAME = "Anonymous"

RANGE_WEEK = "week"
RANGE_MONTH = "month"
RANGES = (RANGE_WEEK, RANGE_MONTH)


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def aggregate_leaderboard(records: Iterable[Any], start_date: str) -> list[LeaderboardRow]:
    """
    Sum points per name for records dated on or after `start_date`

    Args:
        records: ActivityRecord models or plain dicts with name/points/date
        start_date: ISO YYYY-MM-DD lower bound (inclusive)

    Returns:
        Rows ordered by points descending, ties by name ascending
    """
    totals: dict[str, int] = {}
    for record in records:
        record_date = _field(record, "date")
        if not record_date or str(record_date) < start_date:
            continue
        name = _field(record, "name") or ANONYMOUS_NAME
        totals[name] = totals.get(name, 0) + int(_field(record, "points") or 0)

    rows = [LeaderboardRow(name=name, points=points) for name, points in totals.items()]
    rows.sort(key=lambda row: (-row.points, row.name))
    return rows


def range_start(range_name: str, today: date) -> date:
    """
    First day included by a leaderboard range preset

    - week: 7 days before today
    - month: same day one calendar month earlier
    """
    if range_name == RANGE_WEEK:
        return today - timedelta(days=7)
    if range_name == RANGE_MONTH:
        return subtract_months(today, 1)
    raise ValueError(f"Unknown leaderboard range '{range_name}'")

