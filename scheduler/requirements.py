"""
Study-requirement estimation.

Turns coursework (courses, pending assignments, upcoming exams) into the
hours-per-course demand signal the allocator consumes. Upcoming work is
halved: preparation is assumed to spread over more than one week.
"""

import logging
from datetime import date as date_type, timedelta
from typing import Dict, Iterable, List, Optional

from models import (
    Course, Assignment, AssignmentPriority, AssignmentStatus, Exam, StudyRequirement
)

logger = logging.getLogger(__name__)


class StudyRequirementEstimator:
    """
    Weekly study demand per course:
        base + (assignment hours / 2) + (exam hours / 2)
    """

    # ~2 hours per credit hour for a 3-credit course
    BASE_WEEKLY_HOURS = 6.0
    HORIZON_DAYS = 14
    HOURS_PER_EXAM = 5.0
    PRIORITY_HOURS = {
        AssignmentPriority.HIGH: 3.0,
        AssignmentPriority.MEDIUM: 2.0,
        AssignmentPriority.LOW: 1.0,
    }

    def __init__(self, base_hours: Optional[float] = None, horizon_days: Optional[int] = None):
        self.base_hours = self.BASE_WEEKLY_HOURS if base_hours is None else base_hours
        self.horizon_days = self.HORIZON_DAYS if horizon_days is None else horizon_days

    def estimate(
        self,
        courses: Iterable[Course],
        assignments: Iterable[Assignment],
        exams: Iterable[Exam],
        today: Optional[date_type] = None
    ) -> Dict[int, StudyRequirement]:
        """
        Returns course_id -> StudyRequirement, in course order.
        Only pending assignments and exams within [today, today + horizon] count.
        """
        today = today or date_type.today()
        horizon_end = today + timedelta(days=self.horizon_days)

        upcoming_assignments: Dict[int, List[Assignment]] = {}
        for a in assignments:
            if a.status == AssignmentStatus.PENDING and today <= a.due_date <= horizon_end:
                upcoming_assignments.setdefault(a.course_id, []).append(a)

        upcoming_exams: Dict[int, List[Exam]] = {}
        for e in exams:
            if today <= e.exam_date <= horizon_end:
                upcoming_exams.setdefault(e.course_id, []).append(e)

        requirements = {}
        for course in courses:
            course_assignments = upcoming_assignments.get(course.id, [])
            course_exams = upcoming_exams.get(course.id, [])

            assignment_hours = sum(self.assignment_hours(a) for a in course_assignments)
            exam_hours = len(course_exams) * self.HOURS_PER_EXAM

            requirements[course.id] = StudyRequirement(
                course_id=course.id,
                course_name=course.name,
                course_code=course.code,
                color=course.color,
                hours=self.base_hours + assignment_hours / 2 + exam_hours / 2,
                upcoming_assignments=len(course_assignments),
                upcoming_exams=len(course_exams)
            )
            logger.debug(
                f"{course.code or course.name}: {requirements[course.id].hours:.1f}h "
                f"({len(course_assignments)} assignments, {len(course_exams)} exams)"
            )

        return requirements

    def assignment_hours(self, assignment: Assignment) -> float:
        """The student's estimate if given, otherwise a priority-based guess."""
        if assignment.estimated_hours:
            return assignment.estimated_hours
        return self.PRIORITY_HOURS.get(assignment.priority, self.PRIORITY_HOURS[AssignmentPriority.LOW])
