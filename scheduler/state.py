"""
Allocation State Management.

One AllocationState is created per allocation run and owns everything that
changes during it:
1. Remaining study need per course (a private copy of the requirements).
2. The occupied grid, the ranked free slots and the placed study blocks.
3. Inputs that were discarded or clamped, for reporting.
Nothing here is shared between runs.
"""

from typing import List, Dict, Any, Optional, Union, Mapping, Iterable
from collections import defaultdict

from models import (
    StudyRequirement, StudyBlock, FreeSlot, OccupiedInterval, WeeklySchedule, WEEKDAY_NAMES
)
from .constraints import ConstraintViolation

RequirementsInput = Union[Mapping[Any, StudyRequirement], Iterable[StudyRequirement]]


class AllocationState:
    """
    Maintains the mutable state of one allocation run.
    """

    def __init__(self, requirements: RequirementsInput):
        """Copy the requirements; course order is the tie-break order."""
        if isinstance(requirements, Mapping):
            requirements = requirements.values()

        self.requirements: Dict[int, StudyRequirement] = {}
        for req in requirements:
            if req.course_id in self.requirements:
                # Same course listed twice: need adds up
                merged = self.requirements[req.course_id]
                self.requirements[req.course_id] = merged.model_copy(
                    update={"hours": merged.hours + req.hours}
                )
            else:
                self.requirements[req.course_id] = req

        self.remaining: Dict[int, float] = {cid: req.hours for cid, req in self.requirements.items()}

        self.grid: Dict[int, List[OccupiedInterval]] = {day: [] for day in range(7)}
        self.free_slots: List[FreeSlot] = []
        self.study_blocks: List[StudyBlock] = []
        self.allocated_by_course: Dict[int, float] = defaultdict(float)
        self.violations: List[ConstraintViolation] = []
        self.schedule: Optional[WeeklySchedule] = None

    def neediest_course(self) -> Optional[int]:
        """
        The course with the greatest remaining need, or None when every need is met.
        Ties go to the course listed first.
        """
        target, max_hours = None, 0.0
        for course_id, hours in self.remaining.items():
            if hours > max_hours:
                target, max_hours = course_id, hours
        return target

    def add_block(self, block: StudyBlock) -> None:
        """Commit a study block and charge it against its course."""
        self.study_blocks.append(block)
        self.allocated_by_course[block.course_id] += block.duration_hours
        left = self.remaining.get(block.course_id, 0.0) - block.duration_hours
        self.remaining[block.course_id] = max(0.0, round(left, 6))

    def record_violation(self, violation: ConstraintViolation) -> None:
        self.violations.append(violation)

    # --- Totals ---

    @property
    def recommended_hours(self) -> float:
        return sum(req.hours for req in self.requirements.values())

    @property
    def allocated_hours(self) -> float:
        return sum(block.duration_hours for block in self.study_blocks)

    @property
    def deficit_hours(self) -> float:
        return max(0.0, self.recommended_hours - self.allocated_hours)

    # --- Reporting Methods ---

    def get_statistics(self) -> Dict[str, Any]:
        """Summary numbers for the end-of-run report."""
        per_day = defaultdict(float)
        for block in self.study_blocks:
            per_day[block.day_of_week] += block.duration_hours

        busiest_day = None
        if per_day:
            day, hours = max(per_day.items(), key=lambda x: x[1])
            busiest_day = (WEEKDAY_NAMES[day], round(hours, 2))

        per_course = {}
        for course_id, req in self.requirements.items():
            label = req.course_code or req.course_name or str(course_id)
            per_course[label] = f"{self.allocated_by_course[course_id]:.1f}/{req.hours:.1f}h"

        return {
            "study_blocks": len(self.study_blocks),
            "free_slots": len(self.free_slots),
            "recommended_hours": round(self.recommended_hours, 2),
            "allocated_hours": round(self.allocated_hours, 2),
            "deficit_hours": round(self.deficit_hours, 2),
            "busiest_day": busiest_day,
            "per_course": per_course,
            "discarded_inputs": sum(1 for v in self.violations if v.constraint_type in ("Malformed", "Empty")),
        }

    def get_shortfall_report(self) -> List[Dict]:
        """
        Courses whose need was not fully met, biggest gap first.
        """
        report = []
        for course_id, left in self.remaining.items():
            if left <= 0:
                continue
            req = self.requirements[course_id]
            report.append({
                "course_id": course_id,
                "course_name": req.course_name,
                "course_code": req.course_code,
                "requested_hours": req.hours,
                "allocated_hours": self.allocated_by_course[course_id],
                "missing_hours": left,
            })

        report.sort(key=lambda x: x["missing_hours"], reverse=True)
        return report
