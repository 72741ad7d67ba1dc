from __future__ import annotations

from collections.abc import Iterable
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from resourcedesk.core.exceptions import AllocationError, AllocationErrorKind
from resourcedesk.core.timeutils import day_name
from resourcedesk.models.classroom import Classroom
from resourcedesk.models.course import Course
from resourcedesk.models.faculty import Faculty
from resourcedesk.models.section import Section
from resourcedesk.models.time_slot import TimeSlot
from resourcedesk.models.timetable_entry import TimetableEntry
from resourcedesk.schemas.timetable import TimetableEntryDetailOut
from resourcedesk.services.slot_allocator import (
    AllocationRequest,
    PlannedEntry,
    SessionPolicy,
    SlotAllocator,
)
from resourcedesk.services.snapshot import CourseView, EntryView, FacultyView, SlotView

logger = logging.getLogger(__name__)


def load_time_slots(db: Session) -> list[SlotView]:
    return [
        SlotView(id=item.id, slot_number=item.slot_number, start_time=item.start_time, end_time=item.end_time)
        for item in db.execute(select(TimeSlot).order_by(TimeSlot.slot_number)).scalars()
    ]


def load_active_entries(db: Session, *, day_of_week: int | None = None) -> list[EntryView]:
    query = (
        select(TimetableEntry, TimeSlot.start_time, TimeSlot.slot_number, Section.name)
        .outerjoin(TimeSlot, TimeSlot.id == TimetableEntry.time_slot_id)
        .outerjoin(Section, Section.id == TimetableEntry.section_id)
        .where(TimetableEntry.is_active.is_(True))
    )
    if day_of_week is not None:
        query = query.where(TimetableEntry.day_of_week == day_of_week)

    views: list[EntryView] = []
    for entry, start_time, slot_number, section_name in db.execute(query).all():
        views.append(
            EntryView(
                id=entry.id,
                section_id=entry.section_id,
                time_slot_id=entry.time_slot_id,
                day_of_week=entry.day_of_week,
                faculty_id=entry.faculty_id,
                classroom_id=entry.classroom_id,
                course_id=entry.course_id,
                is_active=entry.is_active,
                start_time=start_time,
                slot_number=slot_number,
                section_name=section_name,
            )
        )
    return views


def has_active_entries(db: Session, column, value: str) -> bool:
    query = select(TimetableEntry.id).where(column == value, TimetableEntry.is_active.is_(True)).limit(1)
    return db.execute(query).first() is not None


def load_course(db: Session, course_id: str) -> CourseView | None:
    course = db.get(Course, course_id)
    if course is None:
        return None
    return CourseView(id=course.id, code=course.code, duration_hours=course.duration_hours, is_lab=course.is_lab)


def load_faculty_roster(db: Session) -> list[FacultyView]:
    return [
        FacultyView(id=item.id, name=item.name, is_available=item.is_available)
        for item in db.execute(select(Faculty).order_by(Faculty.name)).scalars()
    ]


def check_references(db: Session, request: AllocationRequest) -> None:
    lookups: list[tuple[str, type, str | None]] = [
        ("Section", Section, request.section_id),
        ("Faculty", Faculty, request.faculty_id),
        ("Classroom", Classroom, request.classroom_id),
    ]
    for label, model, record_id in lookups:
        if record_id is None:
            continue
        if db.get(model, record_id) is None:
            raise AllocationError(
                AllocationErrorKind.not_found,
                f"{label} with id {record_id} not found",
                details={"resource_type": label, "resource_id": record_id},
            )


def build_allocator(db: Session, request: AllocationRequest, policy: SessionPolicy) -> SlotAllocator:
    course = load_course(db, request.course_id)
    return SlotAllocator(
        slots=load_time_slots(db),
        entries=load_active_entries(db, day_of_week=request.day_of_week),
        courses={course.id: course} if course is not None else {},
        policy=policy,
    )


def plan_entries(db: Session, request: AllocationRequest, policy: SessionPolicy) -> list[PlannedEntry]:
    check_references(db, request)
    return build_allocator(db, request, policy).plan(request)


def commit_entries(db: Session, planned: list[PlannedEntry]) -> list[TimetableEntry]:
    """Insert the whole batch in one transaction, or none of it."""
    records = [
        TimetableEntry(
            section_id=item.section_id,
            course_id=item.course_id,
            faculty_id=item.faculty_id,
            classroom_id=item.classroom_id,
            day_of_week=item.day_of_week,
            time_slot_id=item.time_slot_id,
            is_active=True,
        )
        for item in planned
    ]
    if not records:
        return records
    first = planned[0]
    db.add_all(records)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning(
            "Uniqueness violation while committing %d timetable entries for section %s",
            len(planned),
            first.section_id,
        )
        raise AllocationError(
            AllocationErrorKind.conflict_at_commit,
            "Conflict: this slot was just taken by another booking. Refresh and try again.",
            details={
                "day_of_week": first.day_of_week,
                "time_slot_ids": [item.time_slot_id for item in planned],
            },
        ) from exc
    for record in records:
        db.refresh(record)
    logger.info(
        "Committed %d timetable entries for section %s on %s",
        len(records),
        first.section_id,
        day_name(first.day_of_week),
    )
    return records


def place_entries(db: Session, request: AllocationRequest, policy: SessionPolicy) -> list[TimetableEntry]:
    return commit_entries(db, plan_entries(db, request, policy))


def describe_entries(db: Session, entries: Iterable[TimetableEntry | EntryView]) -> list[TimetableEntryDetailOut]:
    items = list(entries)
    if not items:
        return []

    def by_id(model, ids: set[str | None]) -> dict:
        wanted = {item for item in ids if item}
        if not wanted:
            return {}
        return {row.id: row for row in db.execute(select(model).where(model.id.in_(wanted))).scalars()}

    slots = by_id(TimeSlot, {item.time_slot_id for item in items})
    sections = by_id(Section, {item.section_id for item in items})
    courses = by_id(Course, {item.course_id for item in items})
    faculty = by_id(Faculty, {item.faculty_id for item in items})
    classrooms = by_id(Classroom, {item.classroom_id for item in items})
    created = by_id(TimetableEntry, {item.id for item in items if isinstance(item, EntryView)})

    output: list[TimetableEntryDetailOut] = []
    for item in items:
        slot = slots.get(item.time_slot_id)
        section = sections.get(item.section_id)
        course = courses.get(item.course_id)
        member = faculty.get(item.faculty_id)
        room = classrooms.get(item.classroom_id)
        created_at = getattr(item, "created_at", None)
        if created_at is None and item.id in created:
            created_at = created[item.id].created_at
        output.append(
            TimetableEntryDetailOut(
                id=item.id,
                section_id=item.section_id,
                classroom_id=item.classroom_id,
                faculty_id=item.faculty_id,
                course_id=item.course_id,
                time_slot_id=item.time_slot_id,
                day_of_week=item.day_of_week,
                is_active=item.is_active,
                created_at=created_at,
                day=day_name(item.day_of_week),
                slot_number=slot.slot_number if slot else None,
                start_time=slot.start_time if slot else None,
                end_time=slot.end_time if slot else None,
                section_name=section.name if section else None,
                course_code=course.code if course else None,
                course_name=course.name if course else None,
                faculty_name=member.name if member else None,
                classroom_name=room.name if room else None,
            )
        )
    output.sort(key=lambda item: (item.day_of_week, item.slot_number or 0, item.section_name or ""))
    return output
