"""
Hard Constraint Validation Logic.

This module answers two questions for the allocator:
1. "Can this fixed commitment be placed on the grid?" (readable times, non-empty span)
2. "Can this study block go here?" (inside the study window, no overlap)
It also owns the per-day study windows.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from models import OccupiedInterval, IntervalKind, StudyBlock, WEEKDAYS
from models.clock import MINUTES_PER_DAY, safe_minutes, to_minutes


@dataclass
class ConstraintViolation:
    """Detailed reason for rejecting or adjusting an input or a block."""
    constraint_type: str  # e.g., "Malformed", "Empty", "Wrapped", "Overlap", "Window"
    reason: str
    day_of_week: Optional[int]
    start_time: Optional[str]
    source: str  # title of the class, activity or course involved


class ConstraintChecker:
    """
    Validates hard constraints for study-block placement.
    """

    # Study windows as (open, close), close exclusive
    STUDY_WINDOWS = {
        "weekday": ("09:00", "22:00"),
        "weekend": ("10:00", "20:00"),
    }

    def __init__(
        self,
        weekday_window: Optional[Tuple[str, str]] = None,
        weekend_window: Optional[Tuple[str, str]] = None
    ):
        weekday = weekday_window or self.STUDY_WINDOWS["weekday"]
        weekend = weekend_window or self.STUDY_WINDOWS["weekend"]
        self.windows = {
            "weekday": (to_minutes(weekday[0]), to_minutes(weekday[1])),
            "weekend": (to_minutes(weekend[0]), to_minutes(weekend[1])),
        }
        for name, (open_min, close_min) in self.windows.items():
            if close_min <= open_min:
                raise ValueError(f"The {name} study window must close after it opens")

    def window_for(self, day_of_week: int) -> Tuple[int, int]:
        """Study window of a day in minutes since midnight."""
        return self.windows["weekday" if day_of_week in WEEKDAYS else "weekend"]

    def to_interval(
        self,
        kind: IntervalKind,
        title: str,
        day_of_week: Optional[int],
        start_time: Optional[str],
        end_time: Optional[str],
        metadata: Optional[Dict[str, Any]] = None
    ) -> Tuple[Optional[OccupiedInterval], Optional[ConstraintViolation]]:
        """
        Turn a class or activity into an OccupiedInterval.

        Returns (interval, None) when it is clean, (interval, violation) when it
        was clamped, and (None, violation) when it had to be discarded.
        """
        if day_of_week is None or not 0 <= day_of_week <= 6:
            return None, ConstraintViolation(
                "Malformed", f"No valid weekday ({day_of_week!r})", day_of_week, start_time, title
            )

        start_min = safe_minutes(start_time)
        end_min = safe_minutes(end_time)
        if start_min is None or end_min is None or start_min >= MINUTES_PER_DAY:
            return None, ConstraintViolation(
                "Malformed", f"Unreadable times {start_time!r}-{end_time!r}", day_of_week, start_time, title
            )

        if start_min == end_min:
            return None, ConstraintViolation(
                "Empty", "Start and end are the same", day_of_week, start_time, title
            )

        violation = None
        if end_min < start_min:
            # Wrapped past midnight: it occupies the rest of this day.
            violation = ConstraintViolation(
                "Wrapped", f"Ends at {end_time} next day, clamped to midnight", day_of_week, start_time, title
            )
            end_min = MINUTES_PER_DAY

        interval = OccupiedInterval(
            day_of_week=day_of_week,
            start_minute=start_min,
            end_minute=end_min,
            start_time=start_time,
            end_time=end_time,
            kind=kind,
            title=title,
            metadata=metadata or {}
        )
        return interval, violation

    def check_block(
        self,
        block: StudyBlock,
        occupied: List[OccupiedInterval],
        placed: List[StudyBlock]
    ) -> Optional[ConstraintViolation]:
        """
        Master validation for a study block. Returns None if valid.
        """
        start = to_minutes(block.start_time)
        end = start + int(round(block.duration_hours * 60, 6))
        label = block.course_name or str(block.course_id)

        open_min, close_min = self.window_for(block.day_of_week)
        if start < open_min or end > close_min:
            return ConstraintViolation(
                "Window", "Outside the study window", block.day_of_week, block.start_time, label
            )

        for interval in occupied:
            if interval.day_of_week != block.day_of_week:
                continue
            # Standard Overlap Logic: StartA < EndB and StartB < EndA
            if start < interval.end_minute and interval.start_minute < end:
                return ConstraintViolation(
                    "Overlap", f"Clash with {interval.kind.value} {interval.title}",
                    block.day_of_week, block.start_time, label
                )

        for other in placed:
            if other.day_of_week != block.day_of_week:
                continue
            o_start = to_minutes(other.start_time)
            o_end = o_start + int(round(other.duration_hours * 60, 6))
            if start < o_end and o_start < end:
                return ConstraintViolation(
                    "Overlap", f"Clash with study block for {other.course_name or other.course_id}",
                    block.day_of_week, block.start_time, label
                )

        return None
