"""
Data models package for the Study Week Planner.

This package exports the three groups of the data architecture:
1. Activities (ParsedActivity, ActivityCategory)
2. Coursework (Course, Assignment, Exam)
3. Schedule (ClassMeeting, FreeSlot, StudyRequirement, StudyBlock, WeeklySchedule)
"""

from .activity import (
    ParsedActivity,
    ActivityCategory,
    Recurrence,
    WEEKDAY_NAMES,
    WEEKDAYS,
    WEEKEND
)

from .coursework import (
    Course,
    Assignment,
    AssignmentPriority,
    AssignmentStatus,
    Exam
)

from .schedule import (
    ClassMeeting,
    OccupiedInterval,
    IntervalKind,
    FreeSlot,
    StudyRequirement,
    StudyBlock,
    EventType,
    ScheduleEvent,
    DaySchedule,
    StudyHoursSummary,
    WeeklySchedule
)

__all__ = [
    # --- Activity Models ---
    "ParsedActivity",
    "ActivityCategory",
    "Recurrence",
    "WEEKDAY_NAMES",
    "WEEKDAYS",
    "WEEKEND",

    # --- Coursework Models ---
    "Course",
    "Assignment",
    "AssignmentPriority",
    "AssignmentStatus",
    "Exam",

    # --- Schedule Models ---
    "ClassMeeting",
    "OccupiedInterval",
    "IntervalKind",
    "FreeSlot",
    "StudyRequirement",
    "StudyBlock",
    "EventType",
    "ScheduleEvent",
    "DaySchedule",
    "StudyHoursSummary",
    "WeeklySchedule",
]
