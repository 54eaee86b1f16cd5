"""Tests for the Weekly Schedule Allocator.

Covers free-slot discovery, slot priority, greedy allocation and assembly,
plus the invariants every generated week must hold.
"""
import pytest

from models import ClassMeeting, ParsedActivity, StudyRequirement, EventType
from models.clock import to_minutes
from scheduler.engine import WeeklyScheduleGenerator, generate_weekly_schedule
from scheduler.scoring import SlotScorer


def make_class(day, start, end, course_id=1, name="Linear Algebra", code="MATH 221"):
    return ClassMeeting(
        course_id=course_id, course_name=name, course_code=code,
        day_of_week=day, start_time=start, end_time=end, location="Hall B"
    )


def make_activity(day, start, end, title="Gym"):
    return ParsedActivity(title=title, day_of_week=day, start_time=start, end_time=end)


def make_requirement(course_id, hours, name=None):
    return StudyRequirement(course_id=course_id, hours=hours, course_name=name or f"Course {course_id}")


@pytest.fixture
def generator() -> WeeklyScheduleGenerator:
    return WeeklyScheduleGenerator()


def slots_for_day(state, day):
    return sorted(
        [(s.start_time, s.end_time) for s in state.free_slots if s.day_of_week == day]
    )


def test_empty_days_span_the_whole_window(generator):
    state = generator.run([], [], [])

    assert len(state.free_slots) == 7
    for slot in state.free_slots:
        if slot.day_of_week in (0, 6):
            assert (slot.start_time, slot.end_time) == ("10:00", "20:00")
            assert slot.duration_hours == pytest.approx(10.0)
        else:
            assert (slot.start_time, slot.end_time) == ("09:00", "22:00")
            assert slot.duration_hours == pytest.approx(13.0)


def test_slots_ranked_by_priority_then_day(generator):
    state = generator.run([], [], [])

    assert [s.day_of_week for s in state.free_slots] == [1, 2, 3, 4, 5, 0, 6]
    assert [s.priority for s in state.free_slots] == [5, 5, 5, 5, 5, 3, 3]


def test_gaps_around_occupied_intervals(generator):
    classes = [make_class(1, "10:00", "11:15")]
    activities = [make_activity(1, "18:00", "19:00")]
    state = generator.run(classes, activities, [])

    assert slots_for_day(state, 1) == [
        ("09:00", "10:00"),
        ("11:15", "18:00"),
        ("19:00", "22:00"),
    ]
    priorities = {s.start_time: s.priority for s in state.free_slots if s.day_of_week == 1}
    assert priorities == {"09:00": 5, "11:15": 5, "19:00": 3}


def test_slot_duration_matches_its_clock_times(generator):
    state = generator.run([make_class(1, "10:00", "11:15")], [make_activity(1, "18:00", "19:00")], [])

    durations = {s.start_time: s.duration_hours for s in state.free_slots if s.day_of_week == 1}
    assert durations == {"09:00": 1.0, "11:15": 6.75, "19:00": 3.0}


def test_overlapping_intervals_do_not_move_cursor_back(generator):
    classes = [make_class(2, "10:00", "12:00")]
    activities = [make_activity(2, "11:00", "11:30")]
    state = generator.run(classes, activities, [])

    assert slots_for_day(state, 2) == [("09:00", "10:00"), ("12:00", "22:00")]


def test_short_gaps_are_dropped(generator):
    classes = [make_class(3, "09:45", "12:00"), make_class(3, "12:30", "21:30")]
    state = generator.run(classes, [], [])

    assert slots_for_day(state, 3) == []


def test_slots_stay_inside_the_study_window(generator):
    activities = [make_activity(1, "23:00", "23:30"), make_activity(6, "07:00", "11:00")]
    state = generator.run([], activities, [])

    assert slots_for_day(state, 1) == [("09:00", "22:00")]
    assert slots_for_day(state, 6) == [("11:00", "20:00")]


@pytest.mark.parametrize("day, hour, expected", [
    (1, 9, 5),
    (1, 11, 5),
    (1, 12, 2),
    (1, 14, 4),
    (1, 17, 2),
    (1, 18, 3),
    (1, 20, 2),
    (6, 10, 3),
    (0, 15, 2),
    (0, 19, 1),
    (0, 21, 0),
])
def test_slot_priority(day, hour, expected):
    assert SlotScorer().calculate_priority(day, hour) == expected


def test_greedy_allocation_follows_greatest_need(generator):
    requirements = [make_requirement(1, 4, "Algebra"), make_requirement(2, 2, "Psychology")]
    week = generator.generate([], [], requirements)

    placed = [(b.course_id, b.day_of_week, b.start_time, b.end_time, b.duration_hours) for b in week.study_blocks]
    assert placed == [
        (1, 1, "09:00", "12:00", 3.0),
        (2, 2, "09:00", "11:00", 2.0),
        (1, 3, "09:00", "10:00", 1.0),
    ]
    assert week.study_hours.allocated == pytest.approx(6.0)
    assert week.study_hours.recommended == pytest.approx(6.0)
    assert week.study_hours.deficit == 0


def test_ties_go_to_the_first_listed_course(generator):
    requirements = [make_requirement(7, 2), make_requirement(3, 2)]
    week = generator.generate([], [], requirements)

    assert [b.course_id for b in week.study_blocks] == [7, 3]


def test_requirements_may_be_a_mapping(generator):
    requirements = {5: make_requirement(5, 2), 9: make_requirement(9, 1)}
    week = generator.generate([], [], requirements)

    assert [b.course_id for b in week.study_blocks] == [5, 9]


def test_no_block_exceeds_the_maximum(generator):
    week = generator.generate([], [], [make_requirement(1, 10)])

    assert [b.duration_hours for b in week.study_blocks] == [3.0, 3.0, 3.0, 1.0]
    assert all(b.duration_hours <= generator.MAX_STUDY_BLOCK_HOURS for b in week.study_blocks)


def test_one_block_per_slot(generator):
    """A long slot is used once even when it could hold both courses."""
    week = generator.generate([], [], [make_requirement(1, 1), make_requirement(2, 1)])

    monday_study = [e for e in week.schedule[1].events if e.type == EventType.STUDY]
    assert len(monday_study) == 1
    assert [(b.course_id, b.day_of_week) for b in week.study_blocks] == [(1, 1), (2, 2)]


def test_zero_requirements_allocate_nothing(generator):
    week = generator.generate([make_class(1, "10:00", "11:00")], [], [])

    assert week.study_blocks == []
    assert week.study_hours.recommended == 0
    assert week.study_hours.allocated == 0
    assert week.study_hours.deficit == 0


def test_unmet_need_shows_as_deficit(generator):
    state = generator.run([], [], [make_requirement(1, 100)])
    hours = state.schedule.study_hours

    assert hours.allocated == pytest.approx(21.0)
    assert hours.deficit == pytest.approx(max(0, hours.recommended - hours.allocated))
    assert hours.allocated <= hours.recommended
    assert state.get_shortfall_report()[0]["missing_hours"] == pytest.approx(79.0)


def busy_week():
    classes = [
        make_class(1, "10:00", "11:15"),
        make_class(3, "10:00", "11:15"),
        make_class(2, "13:00", "14:30", course_id=2, name="Psychology", code="PSY 101"),
        make_class(4, "13:00", "14:30", course_id=2, name="Psychology", code="PSY 101"),
        make_class(5, "09:00", "17:00", course_id=3, name="Studio", code="ART 200"),
    ]
    activities = [
        make_activity(1, "18:00", "19:00"),
        make_activity(3, "18:00", "19:00"),
        make_activity(0, "10:00", "14:00", title="Work"),
        make_activity(6, "10:00", "14:00", title="Work"),
        make_activity(2, "16:00", "18:00", title="Soccer Practice"),
    ]
    requirements = [make_requirement(1, 9.5), make_requirement(2, 7), make_requirement(3, 6)]
    return classes, activities, requirements


def test_blocks_never_overlap_fixed_commitments(generator):
    classes, activities, requirements = busy_week()
    week = generator.generate(classes, activities, requirements)

    fixed = [(c.day_of_week, c.start_time, c.end_time) for c in classes]
    fixed += [(a.day_of_week, a.start_time, a.end_time) for a in activities]
    assert week.study_blocks
    for block in week.study_blocks:
        b_start, b_end = to_minutes(block.start_time), to_minutes(block.end_time)
        for day, start, end in fixed:
            if day == block.day_of_week:
                assert not (b_start < to_minutes(end) and to_minutes(start) < b_end)


def test_blocks_never_exceed_course_need(generator):
    classes, activities, requirements = busy_week()
    week = generator.generate(classes, activities, requirements)

    for req in requirements:
        given = sum(b.duration_hours for b in week.study_blocks if b.course_id == req.course_id)
        assert given <= req.hours + 1e-9
    total = sum(b.duration_hours for b in week.study_blocks)
    assert week.study_hours.allocated == pytest.approx(total)
    assert week.study_hours.allocated <= sum(r.hours for r in requirements) + 1e-9


def test_assembled_days_are_sorted_and_labelled(generator):
    classes, activities, requirements = busy_week()
    week = generator.generate(classes, activities, requirements)

    assert [week.schedule[d].day for d in range(7)] == [
        "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"
    ]
    for day in week.schedule.values():
        starts = [to_minutes(e.start_time) for e in day.events]
        assert starts == sorted(starts)

    monday = week.schedule[1].events
    assert monday[0].type == EventType.STUDY
    assert monday[0].title == "Study: Course 1"
    algebra = next(e for e in monday if e.type == EventType.CLASS)
    assert (algebra.code, algebra.location) == ("MATH 221", "Hall B")
    gym = next(e for e in monday if e.type == EventType.ACTIVITY)
    assert gym.category == "personal"


def test_runs_are_independent(generator):
    classes, activities, requirements = busy_week()
    first = generator.generate(classes, activities, requirements)
    second = generator.generate(classes, activities, requirements)

    assert first.to_payload() == second.to_payload()
    assert [r.hours for r in requirements] == [9.5, 7, 6]


def test_malformed_class_is_discarded_not_raised(generator):
    classes = [make_class(1, "10am", "11am")]
    state = generator.run(classes, [], [])

    assert slots_for_day(state, 1) == [("09:00", "22:00")]
    assert [v.constraint_type for v in state.violations] == ["Malformed"]
    assert state.schedule.schedule[1].events == []


def test_zero_length_interval_is_discarded(generator):
    state = generator.run([make_class(2, "12:00", "12:00")], [], [])

    assert [v.constraint_type for v in state.violations] == ["Empty"]
    assert slots_for_day(state, 2) == [("09:00", "22:00")]


def test_interval_past_midnight_occupies_rest_of_day(generator):
    state = generator.run([], [make_activity(1, "21:00", "01:00", title="Night Shift")], [])

    assert slots_for_day(state, 1) == [("09:00", "21:00")]
    assert [v.constraint_type for v in state.violations] == ["Wrapped"]
    event = state.schedule.schedule[1].events[0]
    assert (event.start_time, event.end_time) == ("21:00", "01:00")


def test_activities_without_a_day_are_ignored(generator):
    state = generator.run([], [ParsedActivity(title="Reading", start_time="10:00", end_time="11:00")], [])

    assert len(state.free_slots) == 7
    assert all(not day.events for day in state.schedule.schedule.values())


def test_custom_block_limits():
    generator = WeeklyScheduleGenerator(min_block_hours=2, max_block_hours=2)
    classes = [make_class(1, "10:30", "22:00")]
    week = generator.generate(classes, [], [make_requirement(1, 3)])

    assert [(b.day_of_week, b.duration_hours) for b in week.study_blocks] == [(2, 2.0), (3, 1.0)]


def test_invalid_block_limits_rejected():
    with pytest.raises(ValueError):
        WeeklyScheduleGenerator(min_block_hours=3, max_block_hours=2)


def test_module_level_shortcut():
    week = generate_weekly_schedule([], [], [make_requirement(1, 1)])
    assert len(week.study_blocks) == 1
