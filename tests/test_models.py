"""Tests for the pydantic data models."""
import pytest
from pydantic import ValidationError

from models import (
    ParsedActivity, ActivityCategory, DaySchedule, StudyHoursSummary, WeeklySchedule, StudyBlock
)


def test_expand_multi_day_activity():
    activity = ParsedActivity(title="Gym", days=[3, 1, 3], start_time="18:00", end_time="19:00")

    assert activity.days == [1, 3]
    expanded = activity.expand()
    assert [a.day_of_week for a in expanded] == [1, 3]
    assert all(a.days is None for a in expanded)
    assert all(a.title == "Gym" for a in expanded)


def test_single_day_list_sets_day_of_week():
    activity = ParsedActivity(title="Yoga", days=[0])
    assert activity.day_of_week == 0
    assert [a.day_of_week for a in activity.expand()] == [0]


def test_no_days_expands_to_nothing():
    assert ParsedActivity(title="Reading").expand() == []


def test_is_schedulable_needs_day_and_both_times():
    assert ParsedActivity(title="Gym", day_of_week=1, start_time="18:00", end_time="19:00").is_schedulable
    assert not ParsedActivity(title="Gym", day_of_week=1, start_time="18:00").is_schedulable
    assert not ParsedActivity(title="Gym", start_time="18:00", end_time="19:00").is_schedulable


def test_defaults():
    activity = ParsedActivity(title="Walk")
    assert activity.category == ActivityCategory.PERSONAL
    assert activity.recurrence.value == "weekly"
    assert activity.is_flexible is False


@pytest.mark.parametrize("fields", [
    {"title": ""},
    {"title": "Gym", "day_of_week": 7},
    {"title": "Gym", "days": [1, 9]},
    {"title": "Gym", "start_time": "6pm"},
    {"title": "Gym", "end_time": "24:00"},
    {"title": "Gym", "duration_hours": -1},
    {"title": "Gym", "category": "napping"},
])
def test_invalid_activity_rejected(fields):
    with pytest.raises(ValidationError):
        ParsedActivity(**fields)


def test_weekly_schedule_payload_uses_frontend_keys():
    block = StudyBlock(
        course_id=1, course_name="Linear Algebra", day_of_week=1,
        start_time="09:00", end_time="12:00", duration_hours=3.0
    )
    week = WeeklySchedule(
        schedule={1: DaySchedule(day="Monday", day_index=1)},
        study_hours=StudyHoursSummary(recommended=6.0, allocated=3.0, deficit=3.0),
        study_blocks=[block]
    )

    payload = week.to_payload()
    assert set(payload) == {"schedule", "studyHours", "studyBlocks"}
    assert payload["studyHours"] == {"recommended": 6.0, "allocated": 3.0, "deficit": 3.0}
    assert payload["studyBlocks"][0]["course_id"] == 1
    day = next(iter(payload["schedule"].values()))
    assert day == {"day": "Monday", "dayIndex": 1, "events": []}
