"""
Activity data models for the Study Week Planner.

An activity is a personal, weekly-recurring commitment that is not a class
(gym, work shift, club meeting). The text parser produces them; the
allocator treats them as fixed occupied time.
"""

from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator, model_validator, ConfigDict

from .clock import to_minutes

# Sunday-first numbering, used by every component.
WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
WEEKDAYS = frozenset({1, 2, 3, 4, 5})
WEEKEND = frozenset({0, 6})


class ActivityCategory(str, Enum):
    """Categorization of personal activities."""
    FITNESS = "fitness"
    WORK = "work"
    CLASS = "class"
    EXTRACURRICULAR = "extracurricular"
    STUDY = "study"
    PERSONAL = "personal"


class Recurrence(str, Enum):
    """Recurrence pattern. Only weekly activities are supported."""
    WEEKLY = "weekly"


def validate_clock(value: Optional[str]) -> Optional[str]:
    """Shared validator for optional "HH:MM" fields."""
    if value is None:
        return value
    minutes = to_minutes(value)
    if minutes >= 24 * 60:
        raise ValueError("Clock time must be before 24:00")
    return value


class ParsedActivity(BaseModel):
    """
    A weekly activity extracted from free text (or loaded from the activity store).

    A record straight out of sentence parsing may carry several `days`;
    `expand()` turns it into one record per day with `day_of_week` set.
    """

    title: str = Field(min_length=1, description="Display title, title-cased")
    description: str = Field(default="", description="The sentence the activity came from")

    # --- Timing ---
    days: Optional[List[int]] = Field(
        default=None,
        description="Weekdays found in the sentence (0=Sunday, 6=Saturday), before expansion"
    )
    day_of_week: Optional[int] = Field(default=None, ge=0, le=6, description="0=Sunday, 6=Saturday")
    start_time: Optional[str] = Field(default=None, description="Start as HH:MM")
    end_time: Optional[str] = Field(default=None, description="End as HH:MM")
    duration_hours: Optional[float] = Field(default=None, ge=0, description="Stated duration")

    # --- Metadata ---
    category: ActivityCategory = Field(default=ActivityCategory.PERSONAL)
    recurrence: Recurrence = Field(default=Recurrence.WEEKLY)
    is_flexible: bool = Field(default=False, description="Sentence hinted the activity can move")

    @field_validator('start_time', 'end_time')
    @classmethod
    def validate_times(cls, v):
        return validate_clock(v)

    @field_validator('days')
    @classmethod
    def validate_days(cls, v):
        """Days must be valid weekday numbers; stored sorted and unique."""
        if v is None:
            return v
        if any(d < 0 or d > 6 for d in v):
            raise ValueError("Weekday numbers must be between 0 (Sunday) and 6 (Saturday)")
        return sorted(set(v))

    @model_validator(mode='after')
    def validate_single_day(self):
        """A single-day record does not need the days list."""
        if self.day_of_week is None and self.days and len(self.days) == 1:
            self.day_of_week = self.days[0]
        return self

    @property
    def is_schedulable(self) -> bool:
        """True when the record can be persisted and placed on the weekly grid."""
        return (
            self.day_of_week is not None
            and self.start_time is not None
            and self.end_time is not None
        )

    def expand(self) -> List["ParsedActivity"]:
        """One record per day, each with `day_of_week` set and `days` cleared."""
        if self.days:
            return [self.model_copy(update={"day_of_week": day, "days": None}) for day in self.days]
        if self.day_of_week is not None:
            return [self.model_copy(update={"days": None})]
        return []

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "title": "Gym",
            "description": "I have gym on Monday and Wednesday at 6pm for 1 hour",
            "day_of_week": 1,
            "start_time": "18:00",
            "end_time": "19:00",
            "duration_hours": 1.0,
            "category": "fitness",
            "recurrence": "weekly",
            "is_flexible": False
        }
    })
