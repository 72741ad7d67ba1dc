"""Read-only views of persisted records.

The allocator and the substitute resolver never touch the database; they work
on these frozen copies, built once per request by the timetable store.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SlotView:
    id: str
    slot_number: int
    start_time: str
    end_time: str


@dataclass(frozen=True)
class EntryView:
    id: str
    section_id: str
    time_slot_id: str
    day_of_week: int
    faculty_id: str | None = None
    classroom_id: str | None = None
    course_id: str | None = None
    is_active: bool = True
    # Joined from the slot row; None when the slot is unknown to the snapshot.
    start_time: str | None = None
    slot_number: int | None = None
    section_name: str | None = None


@dataclass(frozen=True)
class CourseView:
    id: str
    code: str
    duration_hours: int | None = 1
    is_lab: bool = False


@dataclass(frozen=True)
class FacultyView:
    id: str
    name: str
    is_available: bool = True
