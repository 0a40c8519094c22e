"""
Date/Time Handling Utilities

Activity is grouped by the calendar day it was logged on in the configured
timezone, not by the UTC instant. Timestamps are stored timezone-aware.
"""

import logging
import calendar
from datetime import date, datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from questboard.config import TIMEZONE

logger = logging.getLogger(__name__)

# Fallback when the configured timezone is unknown
DEFAULT_TIMEZONE = "UTC"


def get_timezone(tz_name: Optional[str] = None) -> ZoneInfo:
    """
    Resolve a timezone name, falling back to UTC

    Args:
        tz_name: IANA timezone name (defaults to TIMEZONE from config)

    Returns:
        ZoneInfo object
    """
    tz_name = tz_name or TIMEZONE
    try:
        return ZoneInfo(tz_name)
    except Exception as e:
        logger.error(f"Invalid timezone '{tz_name}': {e}")
        return ZoneInfo(DEFAULT_TIMEZONE)


def now_utc() -> datetime:
    """Current datetime in UTC (timezone-aware)"""
    return datetime.now(ZoneInfo("UTC"))


def today_local(tz_name: Optional[str] = None) -> date:
    """Today's calendar date in the configured timezone"""
    return datetime.now(get_timezone(tz_name)).date()


def yesterday(day: date) -> date:
    """Calendar day before `day`"""
    return day - timedelta(days=1)


def subtract_months(day: date, months: int) -> date:
    """
    Same day `months` calendar months earlier

    Clamped to the last day of the target month (Mar 31 -> Feb 28/29).
    """
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def format_local_time(moment: datetime, tz_name: Optional[str] = None) -> str:
    """Render an instant as HH:MM:SS in the configured timezone"""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=ZoneInfo("UTC"))
    return moment.astimezone(get_timezone(tz_name)).strftime("%H:%M:%S")
