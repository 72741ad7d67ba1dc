from datetime import date

import pytest

from resourcedesk.services.snapshot import EntryView, FacultyView
from resourcedesk.services.substitute_resolver import SubstituteResolver, weekday_index

# 2026-10-19 is a Monday.
MONDAY = date(2026, 10, 19)


@pytest.fixture
def roster():
    return [
        FacultyView(id="f", name="Farah Iqbal"),
        FacultyView(id="g", name="Gopal Rao"),
        FacultyView(id="h", name="Hana Sato"),
        FacultyView(id="k", name="Kiran Das", is_available=False),
    ]


def entry(entry_id, faculty_id, slot_number, start_time, *, day=1, section="sec-a", active=True):
    return EntryView(
        id=entry_id,
        section_id=section,
        time_slot_id=f"s{slot_number}",
        day_of_week=day,
        faculty_id=faculty_id,
        classroom_id="room-1",
        is_active=active,
        start_time=start_time,
        slot_number=slot_number,
    )


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (date(2026, 10, 18), 0),
        (date(2026, 10, 19), 1),
        (date(2026, 10, 23), 5),
        (date(2026, 10, 24), 6),
    ],
)
def test_weekday_index_counts_from_sunday(value, expected):
    assert weekday_index(value) == expected


def test_busy_faculty_are_excluded_and_free_faculty_offered(roster):
    entries = [
        entry("e1", "f", 2, "11:00"),
        entry("e2", "g", 2, "11:00", section="sec-b"),
        entry("e3", "h", 1, "10:00", section="sec-c"),
    ]

    result = SubstituteResolver(entries=entries, faculty=roster).resolve("f", MONDAY)

    assert result.day_of_week == 1
    assert [item.id for item in result.affected_classes] == ["e1"]
    assert [item.id for item in result.available_substitutes] == ["h"]


def test_no_classes_that_day_offers_everyone_available_but_self(roster):
    entries = [entry("e1", "f", 2, "11:00", day=2), entry("e2", "g", 2, "11:00")]

    result = SubstituteResolver(entries=entries, faculty=roster).resolve("f", MONDAY)

    assert result.affected_classes == []
    assert [item.id for item in result.available_substitutes] == ["g", "h"]


def test_unavailable_faculty_never_offered(roster):
    result = SubstituteResolver(entries=[entry("e1", "f", 1, "10:00")], faculty=roster).resolve("f", MONDAY)

    assert "k" not in {item.id for item in result.available_substitutes}


def test_inactive_entries_neither_affect_nor_block(roster):
    entries = [
        entry("e1", "f", 1, "10:00", active=False),
        entry("e2", "f", 2, "11:00"),
        entry("e3", "g", 2, "11:00", section="sec-b", active=False),
    ]

    result = SubstituteResolver(entries=entries, faculty=roster).resolve("f", MONDAY)

    assert [item.id for item in result.affected_classes] == ["e2"]
    assert [item.id for item in result.available_substitutes] == ["g", "h"]


def test_start_time_matching_conflates_slots_sharing_a_start(roster):
    # Two slot rows with the same start time count as the same instant.
    entries = [entry("e1", "f", 2, "11:00"), entry("e2", "g", 7, "11:00", section="sec-b")]

    by_start = SubstituteResolver(entries=entries, faculty=roster).resolve("f", MONDAY)
    by_slot = SubstituteResolver(entries=entries, faculty=roster, match_mode="slot_id").resolve("f", MONDAY)

    assert [item.id for item in by_start.available_substitutes] == ["h"]
    assert [item.id for item in by_slot.available_substitutes] == ["g", "h"]


def test_candidate_follows_membership_rule(roster):
    entries = [
        entry("e1", "f", 1, "10:00"),
        entry("e2", "f", 4, "14:00"),
        entry("e3", "g", 4, "14:00", section="sec-b"),
        entry("e4", "h", 3, "12:00", section="sec-c"),
    ]
    result = SubstituteResolver(entries=entries, faculty=roster).resolve("f", MONDAY)

    affected_times = {item.start_time for item in result.affected_classes}
    offered = {item.id for item in result.available_substitutes}
    for member in roster:
        busy = any(
            item.faculty_id == member.id and item.start_time in affected_times
            for item in entries
        )
        expected = member.is_available and member.id != "f" and not busy
        assert (member.id in offered) is expected
