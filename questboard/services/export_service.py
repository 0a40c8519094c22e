"""CSV export of a profile's activity history"""

import csv
import io
import logging
from datetime import date
from typing import Optional

from questboard.models.profile import ProfileState
from questboard.utils.datetime_helpers import format_local_time

logger = logging.getLogger(__name__)

CSV_HEADER = ["person", "date", "time", "title", "category", "points"]


def export_csv(state: ProfileState, tz_name: Optional[str] = None) -> str:
    """
    Render history as CSV, one row per entry in history order

    Every field is quoted and embedded double quotes are doubled.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for entry in state.history:
        writer.writerow([
            state.name,
            entry.date.isoformat(),
            format_local_time(entry.timestamp, tz_name),
            entry.title,
            entry.category or "",
            entry.points,
        ])

    logger.info(f"Exported {len(state.history)} entries for {state.name}")
    # No trailing newline after the last row
    return buffer.getvalue().rstrip("\n")


def export_filename(name: str, today: date) -> str:
    return f"questboard-activity-{name}-{today.isoformat()}.csv"
