from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from resourcedesk.api.deps import get_db, get_session_policy
from resourcedesk.core.timeutils import day_name
from resourcedesk.models.timetable_entry import TimetableEntry
from resourcedesk.schemas.timetable import (
    AllocationCheckOut,
    AllocationOut,
    PlannedEntryOut,
    TimetableEntryCreate,
    TimetableEntryDetailOut,
    TimetableEntryOut,
)
from resourcedesk.services.slot_allocator import AllocationRequest, SessionPolicy
from resourcedesk.services.timetable_store import describe_entries, place_entries, plan_entries

router = APIRouter()


def _to_request(payload: TimetableEntryCreate) -> AllocationRequest:
    return AllocationRequest(
        section_id=payload.section_id,
        course_id=payload.course_id,
        day_of_week=payload.day_of_week,
        start_slot_id=payload.start_slot_id,
        faculty_id=payload.faculty_id,
        classroom_id=payload.classroom_id,
        duration_hours=payload.duration_hours,
    )


@router.get("/entries", response_model=list[TimetableEntryDetailOut])
def list_entries(
    section_id: str | None = Query(default=None),
    faculty_id: str | None = Query(default=None),
    classroom_id: str | None = Query(default=None),
    day_of_week: int | None = Query(default=None, ge=0, le=6),
    db: Session = Depends(get_db),
) -> list[TimetableEntryDetailOut]:
    query = select(TimetableEntry).where(TimetableEntry.is_active.is_(True))
    if section_id:
        query = query.where(TimetableEntry.section_id == section_id)
    if faculty_id:
        query = query.where(TimetableEntry.faculty_id == faculty_id)
    if classroom_id:
        query = query.where(TimetableEntry.classroom_id == classroom_id)
    if day_of_week is not None:
        query = query.where(TimetableEntry.day_of_week == day_of_week)
    return describe_entries(db, db.execute(query).scalars())


@router.post("/entries/check", response_model=AllocationCheckOut)
def check_entry(
    payload: TimetableEntryCreate,
    db: Session = Depends(get_db),
    policy: SessionPolicy = Depends(get_session_policy),
) -> AllocationCheckOut:
    planned = plan_entries(db, _to_request(payload), policy)
    return AllocationCheckOut(
        accepted=True,
        duration_hours=len(planned),
        day=day_name(payload.day_of_week),
        entries=[
            PlannedEntryOut(
                section_id=item.section_id,
                course_id=item.course_id,
                faculty_id=item.faculty_id,
                classroom_id=item.classroom_id,
                day_of_week=item.day_of_week,
                time_slot_id=item.time_slot_id,
                slot_number=item.slot_number,
            )
            for item in planned
        ],
    )


@router.post("/entries", response_model=AllocationOut, status_code=status.HTTP_201_CREATED)
def create_entries(
    payload: TimetableEntryCreate,
    db: Session = Depends(get_db),
    policy: SessionPolicy = Depends(get_session_policy),
) -> AllocationOut:
    records = place_entries(db, _to_request(payload), policy)
    return AllocationOut(
        duration_hours=len(records),
        day=day_name(payload.day_of_week),
        entries=[TimetableEntryOut.model_validate(item) for item in records],
    )


@router.delete("/entries/{entry_id}", response_model=TimetableEntryOut)
def deactivate_entry(entry_id: str, db: Session = Depends(get_db)) -> TimetableEntryOut:
    entry = db.get(TimetableEntry, entry_id)
    if entry is None or not entry.is_active:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Timetable entry not found")
    # Soft delete: reallocation logs keep pointing at the original entry.
    entry.is_active = False
    db.commit()
    db.refresh(entry)
    return entry
