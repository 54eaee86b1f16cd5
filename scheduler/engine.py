"""
The Weekly Study Scheduling Engine.

This module implements the "generate my week" pipeline:
1. Grid Construction - classes and weekly activities per weekday, by start time.
2. Free-Slot Discovery - gaps inside each day's study window, ranked by SlotScorer.
3. Greedy Allocation - each slot goes to the course with the most unmet need.
4. Assembly - one sorted event list per weekday plus study-hour totals.
"""

import logging
from typing import List, Dict, Iterable, Optional

from models import (
    ClassMeeting, ParsedActivity, StudyRequirement, StudyBlock, FreeSlot,
    OccupiedInterval, IntervalKind, EventType, ScheduleEvent, DaySchedule,
    StudyHoursSummary, WeeklySchedule, Recurrence, WEEKDAY_NAMES
)
from models.clock import add_hours, format_minutes, hours_between
from .constraints import ConstraintChecker
from .scoring import SlotScorer
from .state import AllocationState, RequirementsInput

logger = logging.getLogger(__name__)


class WeeklyScheduleGenerator:
    """
    Main scheduling engine.
    Ingests fixed commitments and study demand, outputs a WeeklySchedule.
    Holds configuration only, so one instance can serve concurrent callers.
    """

    MIN_STUDY_BLOCK_HOURS = 1.0  # Shortest slot worth studying in
    MAX_STUDY_BLOCK_HOURS = 3.0  # Longest single study session

    def __init__(
        self,
        min_block_hours: Optional[float] = None,
        max_block_hours: Optional[float] = None,
        checker: Optional[ConstraintChecker] = None,
        scorer: Optional[SlotScorer] = None
    ):
        self.min_block_hours = min_block_hours if min_block_hours is not None else self.MIN_STUDY_BLOCK_HOURS
        self.max_block_hours = max_block_hours if max_block_hours is not None else self.MAX_STUDY_BLOCK_HOURS
        if self.min_block_hours <= 0 or self.max_block_hours < self.min_block_hours:
            raise ValueError("Block limits must satisfy 0 < min_block_hours <= max_block_hours")

        self.checker = checker or ConstraintChecker()
        self.scorer = scorer or SlotScorer()

    def generate(
        self,
        classes: Iterable[ClassMeeting],
        activities: Iterable[ParsedActivity],
        requirements: RequirementsInput
    ) -> WeeklySchedule:
        """Build the week and return only the schedule."""
        return self.run(classes, activities, requirements).schedule

    def run(
        self,
        classes: Iterable[ClassMeeting],
        activities: Iterable[ParsedActivity],
        requirements: RequirementsInput
    ) -> AllocationState:
        """
        Execute the full pipeline. The returned state carries the schedule
        together with the grid, slots and anything that was discarded.
        """
        state = AllocationState(requirements)
        logger.info(f"Generating weekly schedule for {len(state.requirements)} courses...")

        # 1. Fixed commitments per weekday
        self.build_weekly_grid(list(classes), list(activities), state)

        # 2. Ranked free time
        state.free_slots = self.find_available_slots(state.grid)
        logger.debug(f"Found {len(state.free_slots)} free slots")

        # 3. Study blocks
        self.allocate_study_blocks(state)

        # 4. Output
        state.schedule = self.build_complete_schedule(state)

        logger.info(
            f"Allocated {state.allocated_hours:.1f}h of {state.recommended_hours:.1f}h "
            f"in {len(state.study_blocks)} blocks"
        )
        return state

    # --- Step A: Grid ---

    def build_weekly_grid(
        self,
        classes: List[ClassMeeting],
        activities: List[ParsedActivity],
        state: AllocationState
    ) -> Dict[int, List[OccupiedInterval]]:
        """Place every readable class and weekly activity on its weekday."""
        for cls in classes:
            interval, violation = self.checker.to_interval(
                IntervalKind.CLASS, cls.course_name, cls.day_of_week, cls.start_time, cls.end_time,
                metadata={"code": cls.course_code, "location": cls.location, "color": cls.color}
            )
            self._place(interval, violation, state)

        for activity in activities:
            if activity.recurrence != Recurrence.WEEKLY:
                continue
            if activity.day_of_week is None:
                logger.debug(f"Activity '{activity.title}' has no day, not placed")
                continue
            interval, violation = self.checker.to_interval(
                IntervalKind.ACTIVITY, activity.title, activity.day_of_week,
                activity.start_time, activity.end_time,
                metadata={"category": activity.category.value, "is_flexible": activity.is_flexible}
            )
            self._place(interval, violation, state)

        for day in state.grid:
            state.grid[day].sort(key=lambda i: i.start_minute)
        return state.grid

    def _place(self, interval, violation, state: AllocationState) -> None:
        if violation:
            logger.warning(f"{violation.constraint_type}: {violation.source} - {violation.reason}")
            state.record_violation(violation)
        if interval:
            state.grid[interval.day_of_week].append(interval)

    # --- Step B: Free slots ---

    def find_available_slots(self, grid: Dict[int, List[OccupiedInterval]]) -> List[FreeSlot]:
        """
        Gaps between occupied intervals inside each day's study window,
        at least min_block_hours long, best priority first.
        """
        slots = []
        for day in range(7):
            open_min, close_min = self.checker.window_for(day)
            cursor = open_min

            for interval in grid.get(day, []):
                # Gap before this occupied interval
                if cursor < interval.start_minute:
                    self._add_slot(slots, day, cursor, min(interval.start_minute, close_min))
                cursor = max(cursor, interval.end_minute)

            # Gap after all occupied intervals until the window closes
            if cursor < close_min:
                self._add_slot(slots, day, cursor, close_min)

        # Stable: equal priorities keep day/time order
        return sorted(slots, key=lambda s: s.priority, reverse=True)

    def _add_slot(self, slots: List[FreeSlot], day: int, start_min: int, end_min: int) -> None:
        start_time, end_time = format_minutes(start_min), format_minutes(end_min)
        duration = hours_between(start_time, end_time)
        if duration < self.min_block_hours:
            return
        slots.append(FreeSlot(
            day_of_week=day,
            start_time=start_time,
            end_time=end_time,
            duration_hours=duration,
            priority=self.scorer.calculate_priority(day, start_min // 60)
        ))

    # --- Step C: Allocation ---

    def allocate_study_blocks(self, state: AllocationState) -> List[StudyBlock]:
        """
        Greedy pass over the ranked slots. Each slot holds at most one block,
        given to the course with the greatest remaining need.
        """
        occupied = [i for day in state.grid.values() for i in day]

        for slot in state.free_slots:
            if slot.duration_hours < self.min_block_hours:
                continue

            course_id = state.neediest_course()
            if course_id is None:
                break

            req = state.requirements[course_id]
            hours = min(slot.duration_hours, self.max_block_hours, state.remaining[course_id])
            block = StudyBlock(
                course_id=course_id,
                course_name=req.course_name,
                course_code=req.course_code,
                color=req.color,
                day_of_week=slot.day_of_week,
                start_time=slot.start_time,
                end_time=add_hours(slot.start_time, hours),
                duration_hours=hours
            )

            violation = self.checker.check_block(block, occupied, state.study_blocks)
            if violation:
                logger.warning(f"Rejected study block: {violation.reason}")
                state.record_violation(violation)
                continue

            state.add_block(block)

        return state.study_blocks

    # --- Step D: Assembly ---

    def build_complete_schedule(self, state: AllocationState) -> WeeklySchedule:
        """Combine classes, activities and study blocks into one grid."""
        days = {day: DaySchedule(day=WEEKDAY_NAMES[day], day_index=day) for day in range(7)}

        for day, intervals in state.grid.items():
            for interval in intervals:
                days[day].events.append(self._event_for_interval(interval))

        for block in state.study_blocks:
            days[block.day_of_week].events.append(ScheduleEvent(
                type=EventType.STUDY,
                title=f"Study: {block.course_name or block.course_id}",
                start_time=block.start_time,
                end_time=block.end_time,
                course_name=block.course_name,
                course_code=block.course_code,
                duration_hours=block.duration_hours,
                color=block.color
            ))

        for schedule_day in days.values():
            schedule_day.events.sort(key=lambda e: e.start_time)

        return WeeklySchedule(
            schedule=days,
            study_hours=StudyHoursSummary(
                recommended=state.recommended_hours,
                allocated=state.allocated_hours,
                deficit=state.deficit_hours
            ),
            study_blocks=list(state.study_blocks)
        )

    def _event_for_interval(self, interval: OccupiedInterval) -> ScheduleEvent:
        meta = interval.metadata
        if interval.kind == IntervalKind.CLASS:
            return ScheduleEvent(
                type=EventType.CLASS,
                title=interval.title,
                start_time=interval.start_time,
                end_time=interval.end_time,
                code=meta.get("code"),
                location=meta.get("location"),
                color=meta.get("color")
            )
        return ScheduleEvent(
            type=EventType.ACTIVITY,
            title=interval.title,
            start_time=interval.start_time,
            end_time=interval.end_time,
            category=meta.get("category"),
            is_flexible=meta.get("is_flexible")
        )


_default_generator = WeeklyScheduleGenerator()


def generate_weekly_schedule(
    classes: Iterable[ClassMeeting],
    activities: Iterable[ParsedActivity],
    requirements: RequirementsInput
) -> WeeklySchedule:
    """Module-level shortcut using the default limits and windows."""
    return _default_generator.generate(classes, activities, requirements)
