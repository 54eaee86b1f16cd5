"""
Wall-clock helpers for the Study Week Planner.

All times travel through the system as zero-padded 24-hour "HH:MM" strings.
Arithmetic happens in minutes since midnight.
"""

import re
from typing import Optional

MINUTES_PER_DAY = 24 * 60

CLOCK_PATTERN = re.compile(r"^(\d{2}):(\d{2})$")


def to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight. Raises ValueError if malformed."""
    match = CLOCK_PATTERN.match(value or "")
    if not match:
        raise ValueError(f"Invalid clock time: {value!r}")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 24 or minutes > 59 or (hours == 24 and minutes):
        raise ValueError(f"Clock time out of range: {value!r}")
    return hours * 60 + minutes


def safe_minutes(value: Optional[str]) -> Optional[int]:
    """Like to_minutes, but returns None for missing or malformed input."""
    try:
        return to_minutes(value)
    except (TypeError, ValueError):
        return None


def format_minutes(total: int) -> str:
    """Format minutes since midnight as "HH:MM". 1440 is rendered as "24:00"."""
    if total == MINUTES_PER_DAY:
        return "24:00"
    total %= MINUTES_PER_DAY
    return f"{total // 60:02d}:{total % 60:02d}"


def add_hours(start: str, hours: float) -> str:
    """
    Add a (fractional) number of hours to a clock time.
    Wraps at midnight and floors to the whole minute.
    """
    total = to_minutes(start) + int(round(hours * 60, 6))
    return format_minutes(total % MINUTES_PER_DAY)


def hours_between(start: str, end: str) -> float:
    """Hours from start to end on the same day; negative if end comes first."""
    return (to_minutes(end) - to_minutes(start)) / 60
