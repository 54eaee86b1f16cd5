"""
Coursework data models for the Study Week Planner.

These records come from the external course/assignment/exam stores and feed
the study-requirement estimate.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field
from datetime import date


class AssignmentPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class AssignmentStatus(str, Enum):
    PENDING = "pending"
    SUBMITTED = "submitted"
    GRADED = "graded"


class Course(BaseModel):
    """A course the student is enrolled in."""
    id: int = Field(description="Course identifier")
    name: str = Field(min_length=1)
    code: str = Field(default="")
    color: str = Field(default="#3b82f6", description="Display color")


class Assignment(BaseModel):
    """A piece of coursework with a due date."""
    id: int
    course_id: int
    title: str = Field(min_length=1)
    due_date: date
    status: AssignmentStatus = Field(default=AssignmentStatus.PENDING)
    priority: AssignmentPriority = Field(default=AssignmentPriority.MEDIUM)
    estimated_hours: Optional[float] = Field(
        default=None,
        ge=0,
        description="Student's own estimate; overrides the priority heuristic"
    )


class Exam(BaseModel):
    """A scheduled exam."""
    id: int
    course_id: int
    title: str = Field(min_length=1)
    exam_date: date
