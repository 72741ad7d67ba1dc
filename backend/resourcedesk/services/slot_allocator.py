from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
import logging

from resourcedesk.core.exceptions import AllocationError, AllocationErrorKind
from resourcedesk.core.timeutils import day_name
from resourcedesk.services.snapshot import CourseView, EntryView, SlotView

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionWindow:
    name: str
    start: int
    end: int

    def contains(self, first_slot: int, last_slot: int) -> bool:
        return self.start <= first_slot and last_slot <= self.end


@dataclass(frozen=True)
class SessionPolicy:
    sessions: tuple[SessionWindow, ...]
    lunch_break: tuple[str, str]

    def window_for(self, first_slot: int, last_slot: int) -> SessionWindow | None:
        for window in self.sessions:
            if window.contains(first_slot, last_slot):
                return window
        return None

    def describe(self) -> str:
        return " or ".join(f"{item.name}: slots {item.start}-{item.end}" for item in self.sessions)


DEFAULT_SESSION_POLICY = SessionPolicy(
    sessions=(
        SessionWindow("Morning", 1, 3),
        SessionWindow("Afternoon", 4, 6),
    ),
    lunch_break=("13:00", "14:00"),
)


@dataclass(frozen=True)
class AllocationRequest:
    section_id: str
    course_id: str
    day_of_week: int
    start_slot_id: str
    faculty_id: str | None = None
    classroom_id: str | None = None
    duration_hours: int | None = None


@dataclass(frozen=True)
class PlannedEntry:
    section_id: str
    course_id: str
    faculty_id: str | None
    classroom_id: str | None
    day_of_week: int
    time_slot_id: str
    slot_number: int
    is_active: bool = True


class OccupancyIndex:
    """Active entries grouped by ``(day_of_week, time_slot_id)``."""

    def __init__(self, entries: Iterable[EntryView]) -> None:
        self._by_cell: dict[tuple[int, str], list[EntryView]] = defaultdict(list)
        for entry in entries:
            if entry.is_active:
                self._by_cell[(entry.day_of_week, entry.time_slot_id)].append(entry)

    def at(self, day_of_week: int, time_slot_id: str) -> list[EntryView]:
        return self._by_cell.get((day_of_week, time_slot_id), [])

    def faculty_entry(self, day_of_week: int, time_slot_id: str, faculty_id: str) -> EntryView | None:
        return next((item for item in self.at(day_of_week, time_slot_id) if item.faculty_id == faculty_id), None)

    def classroom_entry(self, day_of_week: int, time_slot_id: str, classroom_id: str) -> EntryView | None:
        return next((item for item in self.at(day_of_week, time_slot_id) if item.classroom_id == classroom_id), None)

    def section_entry(self, day_of_week: int, time_slot_id: str, section_id: str) -> EntryView | None:
        return next((item for item in self.at(day_of_week, time_slot_id) if item.section_id == section_id), None)


class SlotAllocator:
    """Validates one timetable placement against a snapshot of active entries.

    ``plan`` either returns the ordered batch of entries the placement would
    occupy (one per slot) or raises :class:`AllocationError`. Nothing is
    written; persisting the batch is the caller's job.
    """

    def __init__(
        self,
        *,
        slots: Iterable[SlotView],
        entries: Iterable[EntryView],
        courses: Mapping[str, CourseView] | None = None,
        policy: SessionPolicy = DEFAULT_SESSION_POLICY,
    ) -> None:
        self.slots = sorted(slots, key=lambda item: item.slot_number)
        self.slot_by_id = {item.id: item for item in self.slots}
        self.slot_by_number = {item.slot_number: item for item in self.slots}
        self.courses = dict(courses or {})
        self.policy = policy
        self.index = OccupancyIndex(entries)

    def resolve_duration(self, request: AllocationRequest, course: CourseView | None) -> int:
        if request.duration_hours is not None:
            duration = request.duration_hours
        elif course is not None and course.duration_hours:
            duration = course.duration_hours
        else:
            duration = 1
        if isinstance(duration, bool) or not isinstance(duration, int) or duration < 1:
            raise ValueError("Duration must be a positive integer")
        return duration

    def occupied_slots(self, start_slot: SlotView, duration: int) -> list[SlotView]:
        end_number = start_slot.slot_number + duration - 1
        occupied: list[SlotView] = []
        for number in range(start_slot.slot_number, end_number + 1):
            slot = self.slot_by_number.get(number)
            if slot is None:
                raise AllocationError(
                    AllocationErrorKind.insufficient_slots,
                    f"Not enough consecutive time slots available for this {duration}-hour course",
                    details={
                        "start_slot_number": start_slot.slot_number,
                        "duration_hours": duration,
                        "missing_slot_number": number,
                    },
                )
            occupied.append(slot)
        return occupied

    def check_session(self, occupied: list[SlotView], duration: int) -> None:
        if duration <= 1:
            return
        first, last = occupied[0].slot_number, occupied[-1].slot_number
        if self.policy.window_for(first, last) is None:
            raise AllocationError(
                AllocationErrorKind.session_boundary_violation,
                (
                    f"Course requires {duration} continuous hours within the same session "
                    f"({self.policy.describe()}). This slot cannot accommodate it."
                ),
                details={
                    "start_slot_number": first,
                    "end_slot_number": last,
                    "duration_hours": duration,
                    "lunch_break": list(self.policy.lunch_break),
                },
            )

    def check_conflicts(self, request: AllocationRequest, occupied: list[SlotView]) -> None:
        day = request.day_of_week
        for slot in occupied:
            where = {"day_of_week": day, "day": day_name(day), "time_slot_id": slot.id, "slot_number": slot.slot_number}

            if request.faculty_id:
                clash = self.index.faculty_entry(day, slot.id, request.faculty_id)
                if clash is not None:
                    raise AllocationError(
                        AllocationErrorKind.faculty_conflict,
                        f"Faculty is already assigned to {_section_label(clash)} at this time",
                        details={
                            **where,
                            "faculty_id": request.faculty_id,
                            "conflicting_entry_id": clash.id,
                            "conflicting_section_id": clash.section_id,
                            "conflicting_section_name": clash.section_name,
                        },
                    )

            if request.classroom_id:
                clash = self.index.classroom_entry(day, slot.id, request.classroom_id)
                if clash is not None:
                    raise AllocationError(
                        AllocationErrorKind.classroom_conflict,
                        f"Classroom is already assigned to {_section_label(clash)} at this time",
                        details={
                            **where,
                            "classroom_id": request.classroom_id,
                            "conflicting_entry_id": clash.id,
                            "conflicting_section_id": clash.section_id,
                            "conflicting_section_name": clash.section_name,
                        },
                    )

            clash = self.index.section_entry(day, slot.id, request.section_id)
            if clash is not None:
                raise AllocationError(
                    AllocationErrorKind.section_conflict,
                    "This section already has a class scheduled at this time",
                    details={
                        **where,
                        "section_id": request.section_id,
                        "conflicting_entry_id": clash.id,
                    },
                )

    def plan(self, request: AllocationRequest) -> list[PlannedEntry]:
        if not 0 <= request.day_of_week <= 6:
            raise ValueError("day_of_week must be between 0 (Sunday) and 6 (Saturday)")

        start_slot = self.slot_by_id.get(request.start_slot_id)
        if start_slot is None:
            raise AllocationError(
                AllocationErrorKind.not_found,
                f"Time slot with id {request.start_slot_id} not found",
                details={"resource_type": "TimeSlot", "resource_id": request.start_slot_id},
            )
        course = self.courses.get(request.course_id)
        if course is None:
            raise AllocationError(
                AllocationErrorKind.not_found,
                f"Course with id {request.course_id} not found",
                details={"resource_type": "Course", "resource_id": request.course_id},
            )

        duration = self.resolve_duration(request, course)
        try:
            occupied = self.occupied_slots(start_slot, duration)
            self.check_session(occupied, duration)
            self.check_conflicts(request, occupied)
        except AllocationError as exc:
            logger.info(
                "Placement rejected for section %s on %s slot %d: %s",
                request.section_id,
                day_name(request.day_of_week),
                start_slot.slot_number,
                exc.kind.value,
            )
            raise

        return [
            PlannedEntry(
                section_id=request.section_id,
                course_id=request.course_id,
                faculty_id=request.faculty_id,
                classroom_id=request.classroom_id,
                day_of_week=request.day_of_week,
                time_slot_id=slot.id,
                slot_number=slot.slot_number,
            )
            for slot in occupied
        ]


def _section_label(entry: EntryView) -> str:
    return entry.section_name or f"section {entry.section_id}"
