"""
Numeric input clamping

Out-of-range or non-numeric settings are clamped into a fixed range instead
of being rejected.
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)

DAILY_GOAL_MIN = 10
DAILY_GOAL_MAX = 10000

TIMER_MINUTES_MIN = 1
TIMER_MINUTES_MAX = 180


def clamp(value: int, minimum: int, maximum: int) -> int:
    """Clamp value into [minimum, maximum]"""
    return max(minimum, min(maximum, value))


def parse_int(value: Any) -> int:
    """
    Parse user input as an integer

    Empty or non-numeric input parses as 0; floats are truncated.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    try:
        return int(float(str(value).strip()))
    except (TypeError, ValueError, OverflowError):
        logger.debug(f"Non-numeric input {value!r} parsed as 0")
        return 0


def clamp_daily_goal(value: Any) -> int:
    """Daily point goal, clamped to 10..10000"""
    return clamp(parse_int(value), DAILY_GOAL_MIN, DAILY_GOAL_MAX)


def clamp_timer_minutes(value: Any) -> int:
    """Timer duration in minutes, clamped to 1..180"""
    return clamp(parse_int(value), TIMER_MINUTES_MIN, TIMER_MINUTES_MAX)
