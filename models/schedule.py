"""
Schedule data models for the Study Week Planner.

This module defines both sides of the allocator:
1. Fixed input (ClassMeeting, OccupiedInterval, StudyRequirement)
2. Derived working data (FreeSlot)
3. Output (StudyBlock, ScheduleEvent, DaySchedule, WeeklySchedule)
"""

from typing import Any, Dict, List, Optional
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict

from .clock import MINUTES_PER_DAY


class IntervalKind(str, Enum):
    """What occupies a fixed block of time."""
    CLASS = "class"
    ACTIVITY = "activity"


class EventType(str, Enum):
    """Kinds of events in the assembled weekly grid."""
    CLASS = "class"
    ACTIVITY = "activity"
    STUDY = "study"


class ClassMeeting(BaseModel):
    """
    One weekly meeting of a course, as held by the course-schedule store.
    Times are kept as given; the allocator discards meetings it cannot read.
    """
    course_id: int
    course_name: str = Field(min_length=1)
    course_code: str = Field(default="")
    day_of_week: int = Field(ge=0, le=6, description="0=Sunday, 6=Saturday")
    start_time: str = Field(description="HH:MM")
    end_time: str = Field(description="HH:MM")
    location: str = Field(default="")
    color: str = Field(default="#3b82f6")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "course_id": 1,
            "course_name": "Linear Algebra",
            "course_code": "MATH 221",
            "day_of_week": 2,
            "start_time": "10:00",
            "end_time": "11:15",
            "location": "Hall B",
            "color": "#ef4444"
        }
    })


class OccupiedInterval(BaseModel):
    """A fixed block of time on the weekly grid that study blocks must avoid."""
    day_of_week: int = Field(ge=0, le=6)
    start_minute: int = Field(ge=0, le=MINUTES_PER_DAY)
    end_minute: int = Field(ge=0, le=MINUTES_PER_DAY)
    start_time: str
    end_time: str
    kind: IntervalKind
    title: str
    metadata: Dict[str, Any] = Field(default_factory=dict)


class FreeSlot(BaseModel):
    """A contiguous stretch of unoccupied time inside a day's study window."""
    day_of_week: int = Field(ge=0, le=6)
    start_time: str
    end_time: str
    duration_hours: float = Field(ge=0)
    priority: int = Field(default=0, description="Desirability score, higher is better")


class StudyRequirement(BaseModel):
    """Estimated study hours a course needs this week."""
    course_id: int
    hours: float = Field(ge=0)
    course_name: str = Field(default="")
    course_code: str = Field(default="")
    color: str = Field(default="#3b82f6")
    upcoming_assignments: int = Field(default=0, ge=0)
    upcoming_exams: int = Field(default=0, ge=0)


class StudyBlock(BaseModel):
    """A study session placed into a free slot for one course."""
    course_id: int
    course_name: str = Field(default="")
    course_code: str = Field(default="")
    color: str = Field(default="#3b82f6")
    day_of_week: int = Field(ge=0, le=6)
    start_time: str
    end_time: str
    duration_hours: float = Field(gt=0)

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "course_id": 1,
            "course_name": "Linear Algebra",
            "course_code": "MATH 221",
            "day_of_week": 1,
            "start_time": "09:00",
            "end_time": "12:00",
            "duration_hours": 3.0
        }
    })


class ScheduleEvent(BaseModel):
    """An entry on the assembled weekly grid. Optional fields depend on the type."""
    type: EventType
    title: str
    start_time: str
    end_time: str

    # --- Class ---
    code: Optional[str] = None
    location: Optional[str] = None

    # --- Activity ---
    category: Optional[str] = None
    is_flexible: Optional[bool] = None

    # --- Study ---
    course_name: Optional[str] = None
    course_code: Optional[str] = None
    duration_hours: Optional[float] = None

    color: Optional[str] = None


class DaySchedule(BaseModel):
    """All events of one weekday, ascending by start time."""
    day: str
    day_index: int = Field(ge=0, le=6, alias="dayIndex")
    events: List[ScheduleEvent] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class StudyHoursSummary(BaseModel):
    recommended: float = Field(ge=0)
    allocated: float = Field(ge=0)
    deficit: float = Field(ge=0)


class WeeklySchedule(BaseModel):
    """Result of one allocation run."""
    schedule: Dict[int, DaySchedule]
    study_hours: StudyHoursSummary = Field(alias="studyHours")
    study_blocks: List[StudyBlock] = Field(default_factory=list, alias="studyBlocks")

    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready dict in the shape the planner UI reads."""
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)
