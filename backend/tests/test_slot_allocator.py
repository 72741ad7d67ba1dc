import pytest

from resourcedesk.core.exceptions import AllocationError, AllocationErrorKind
from resourcedesk.services.slot_allocator import (
    AllocationRequest,
    SessionPolicy,
    SessionWindow,
    SlotAllocator,
)
from resourcedesk.services.snapshot import CourseView, EntryView, SlotView

MONDAY = 1

SLOT_TIMES = ["10:00", "11:00", "12:00", "14:00", "15:00", "16:00"]


@pytest.fixture
def slots():
    return [
        SlotView(id=f"s{number}", slot_number=number, start_time=start, end_time=f"{int(start[:2]) + 1:02d}:00")
        for number, start in enumerate(SLOT_TIMES, start=1)
    ]


@pytest.fixture
def courses():
    return {
        "theory": CourseView(id="theory", code="CS201", duration_hours=1),
        "lab": CourseView(id="lab", code="CS201L", duration_hours=2, is_lab=True),
        "studio": CourseView(id="studio", code="AR300", duration_hours=3),
    }


def build(slots, courses, entries=(), **kwargs):
    return SlotAllocator(slots=slots, entries=list(entries), courses=courses, **kwargs)


def request(**overrides):
    values = {
        "section_id": "sec-a",
        "course_id": "theory",
        "day_of_week": MONDAY,
        "start_slot_id": "s1",
        "faculty_id": "fac-f",
        "classroom_id": "room-1",
    }
    values.update(overrides)
    return AllocationRequest(**values)


def test_lab_starting_before_lunch_is_rejected(slots, courses):
    allocator = build(slots, courses)

    with pytest.raises(AllocationError) as excinfo:
        allocator.plan(request(course_id="lab", start_slot_id="s3"))

    assert excinfo.value.kind == AllocationErrorKind.session_boundary_violation
    assert excinfo.value.status_code == 422
    assert excinfo.value.details["start_slot_number"] == 3
    assert excinfo.value.details["end_slot_number"] == 4


def test_two_hour_course_in_empty_morning_produces_two_entries(slots, courses):
    planned = build(slots, courses).plan(request(course_id="lab", start_slot_id="s1"))

    assert [item.slot_number for item in planned] == [1, 2]
    assert [item.time_slot_id for item in planned] == ["s1", "s2"]


def test_faculty_already_teaching_another_section_is_rejected(slots, courses):
    existing = EntryView(
        id="e1",
        section_id="sec-b",
        time_slot_id="s2",
        day_of_week=MONDAY,
        faculty_id="fac-f",
        classroom_id="room-9",
        section_name="CSE 3rd Year",
    )
    allocator = build(slots, courses, [existing])

    with pytest.raises(AllocationError) as excinfo:
        allocator.plan(request(start_slot_id="s2"))

    assert excinfo.value.kind == AllocationErrorKind.faculty_conflict
    assert excinfo.value.status_code == 409
    assert "CSE 3rd Year" in excinfo.value.message
    assert excinfo.value.details["conflicting_entry_id"] == "e1"
    assert excinfo.value.details["slot_number"] == 2


def test_faculty_conflict_is_reported_before_classroom_and_section(slots, courses):
    existing = EntryView(
        id="e1",
        section_id="sec-a",
        time_slot_id="s1",
        day_of_week=MONDAY,
        faculty_id="fac-f",
        classroom_id="room-1",
    )

    with pytest.raises(AllocationError) as excinfo:
        build(slots, courses, [existing]).plan(request())

    assert excinfo.value.kind == AllocationErrorKind.faculty_conflict


def test_classroom_conflict(slots, courses):
    existing = EntryView(id="e1", section_id="sec-b", time_slot_id="s1", day_of_week=MONDAY, classroom_id="room-1")

    with pytest.raises(AllocationError) as excinfo:
        build(slots, courses, [existing]).plan(request())

    assert excinfo.value.kind == AllocationErrorKind.classroom_conflict
    assert excinfo.value.message.startswith("Classroom is already assigned")


def test_section_conflict_without_faculty_or_classroom(slots, courses):
    existing = EntryView(id="e1", section_id="sec-a", time_slot_id="s2", day_of_week=MONDAY, faculty_id="fac-x")
    allocator = build(slots, courses, [existing])

    with pytest.raises(AllocationError) as excinfo:
        allocator.plan(request(course_id="lab", faculty_id=None, classroom_id=None))

    assert excinfo.value.kind == AllocationErrorKind.section_conflict
    assert excinfo.value.message == "This section already has a class scheduled at this time"
    assert excinfo.value.details["slot_number"] == 2


def test_inactive_entries_and_other_days_do_not_conflict(slots, courses):
    entries = [
        EntryView(id="e1", section_id="sec-b", time_slot_id="s1", day_of_week=MONDAY, faculty_id="fac-f", is_active=False),
        EntryView(id="e2", section_id="sec-a", time_slot_id="s1", day_of_week=MONDAY + 1, faculty_id="fac-f"),
    ]

    planned = build(slots, courses, entries).plan(request())

    assert len(planned) == 1


def test_unassigned_faculty_never_collides(slots, courses):
    existing = EntryView(id="e1", section_id="sec-b", time_slot_id="s1", day_of_week=MONDAY)

    planned = build(slots, courses, [existing]).plan(request(faculty_id=None, classroom_id=None))

    assert planned[0].faculty_id is None


def test_accepted_batch_never_overlaps_existing_entries(slots, courses):
    entries = [
        EntryView(id="e1", section_id="sec-b", time_slot_id="s4", day_of_week=MONDAY, faculty_id="fac-g", classroom_id="room-2"),
        EntryView(id="e2", section_id="sec-c", time_slot_id="s5", day_of_week=MONDAY, faculty_id="fac-h", classroom_id="room-3"),
    ]
    allocator = build(slots, courses, entries)

    planned = allocator.plan(request(course_id="lab", start_slot_id="s4"))

    for item in planned:
        for existing in entries:
            if (existing.day_of_week, existing.time_slot_id) != (item.day_of_week, item.time_slot_id):
                continue
            assert existing.faculty_id != item.faculty_id
            assert existing.classroom_id != item.classroom_id
            assert existing.section_id != item.section_id


def test_multi_slot_batch_shares_everything_but_the_slot(slots, courses):
    planned = build(slots, courses).plan(request(course_id="studio", start_slot_id="s4"))

    assert len(planned) == 3
    assert {(p.section_id, p.faculty_id, p.classroom_id, p.course_id, p.day_of_week) for p in planned} == {
        ("sec-a", "fac-f", "room-1", "studio", MONDAY)
    }
    assert len({item.time_slot_id for item in planned}) == 3
    assert [item.slot_number for item in planned] == [4, 5, 6]


@pytest.mark.parametrize(
    ("start_slot_id", "duration", "accepted"),
    [
        ("s1", 3, True),
        ("s2", 2, True),
        ("s2", 3, False),
        ("s3", 2, False),
        ("s4", 3, True),
        ("s5", 2, True),
    ],
)
def test_multi_hour_courses_stay_within_one_session(slots, courses, start_slot_id, duration, accepted):
    allocator = build(slots, courses)
    payload = request(start_slot_id=start_slot_id, duration_hours=duration)

    if accepted:
        assert len(allocator.plan(payload)) == duration
    else:
        with pytest.raises(AllocationError) as excinfo:
            allocator.plan(payload)
        assert excinfo.value.kind == AllocationErrorKind.session_boundary_violation


def test_running_off_the_last_slot_is_insufficient(slots, courses):
    with pytest.raises(AllocationError) as excinfo:
        build(slots, courses).plan(request(course_id="lab", start_slot_id="s6"))

    assert excinfo.value.kind == AllocationErrorKind.insufficient_slots
    assert excinfo.value.details["missing_slot_number"] == 7


def test_gap_in_slot_numbers_is_insufficient(courses):
    gappy = [
        SlotView(id="s1", slot_number=1, start_time="10:00", end_time="11:00"),
        SlotView(id="s3", slot_number=3, start_time="12:00", end_time="13:00"),
    ]

    with pytest.raises(AllocationError) as excinfo:
        build(gappy, courses).plan(request(course_id="lab"))

    assert excinfo.value.kind == AllocationErrorKind.insufficient_slots
    assert excinfo.value.details["missing_slot_number"] == 2


def test_single_slot_skips_session_check(slots, courses):
    planned = build(slots, courses).plan(request(start_slot_id="s3"))

    assert [item.slot_number for item in planned] == [3]


def test_unknown_slot_and_course_are_not_found(slots, courses):
    allocator = build(slots, courses)

    with pytest.raises(AllocationError) as missing_slot:
        allocator.plan(request(start_slot_id="nope"))
    with pytest.raises(AllocationError) as missing_course:
        allocator.plan(request(course_id="nope"))

    assert missing_slot.value.kind == AllocationErrorKind.not_found
    assert missing_slot.value.details["resource_type"] == "TimeSlot"
    assert missing_course.value.kind == AllocationErrorKind.not_found
    assert missing_course.value.status_code == 404


def test_requested_duration_overrides_course_default(slots, courses):
    allocator = build(slots, courses)

    assert len(allocator.plan(request(course_id="lab", duration_hours=1, start_slot_id="s3"))) == 1
    assert len(allocator.plan(request(course_id="theory", duration_hours=2))) == 2


def test_missing_course_duration_falls_back_to_one_hour(slots):
    allocator = build(slots, {"bare": CourseView(id="bare", code="X1", duration_hours=None)})

    assert len(allocator.plan(request(course_id="bare", start_slot_id="s3"))) == 1


@pytest.mark.parametrize("duration", [0, -2])
def test_non_positive_duration_is_a_value_error(slots, courses, duration):
    with pytest.raises(ValueError):
        build(slots, courses).plan(request(duration_hours=duration))


@pytest.mark.parametrize("day", [-1, 7])
def test_day_out_of_range_is_a_value_error(slots, courses, day):
    with pytest.raises(ValueError):
        build(slots, courses).plan(request(day_of_week=day))


def test_custom_session_policy_moves_the_boundary(slots, courses):
    policy = SessionPolicy(
        sessions=(SessionWindow("Morning", 1, 4), SessionWindow("Afternoon", 5, 6)),
        lunch_break=("14:00", "15:00"),
    )
    allocator = build(slots, courses, policy=policy)

    assert [item.slot_number for item in allocator.plan(request(course_id="lab", start_slot_id="s3"))] == [3, 4]
    with pytest.raises(AllocationError) as excinfo:
        allocator.plan(request(course_id="lab", start_slot_id="s4"))
    assert excinfo.value.kind == AllocationErrorKind.session_boundary_violation
    assert "Morning: slots 1-4" in excinfo.value.message
