from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session

from resourcedesk.api.deps import get_db, get_session_policy
from resourcedesk.api.updates import merged_update
from resourcedesk.core.timeutils import parse_time_to_minutes
from resourcedesk.models.time_slot import TimeSlot
from resourcedesk.models.timetable_entry import TimetableEntry
from resourcedesk.schemas.time_slot import (
    DayLayoutOut,
    SessionWindowOut,
    TimeSlotBase,
    TimeSlotCreate,
    TimeSlotOut,
    TimeSlotUpdate,
)
from resourcedesk.services.slot_allocator import SessionPolicy
from resourcedesk.services.timetable_store import has_active_entries

router = APIRouter()


def _slot_number_taken(db: Session, slot_number: int, *, exclude_id: str | None = None) -> bool:
    query = select(TimeSlot.id).where(TimeSlot.slot_number == slot_number)
    if exclude_id is not None:
        query = query.where(TimeSlot.id != exclude_id)
    return db.execute(query).first() is not None


def _require_ordered(db: Session, slot_number: int, start_time: str, *, exclude_id: str | None = None) -> None:
    # Slot numbers must increase with start time; HH:MM strings compare in clock order.
    query = select(TimeSlot).where(
        or_(
            and_(TimeSlot.slot_number < slot_number, TimeSlot.start_time >= start_time),
            and_(TimeSlot.slot_number > slot_number, TimeSlot.start_time <= start_time),
        )
    )
    if exclude_id is not None:
        query = query.where(TimeSlot.id != exclude_id)
    neighbour = db.execute(query.order_by(TimeSlot.slot_number).limit(1)).scalar_one_or_none()
    if neighbour is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=(
                f"Slot {slot_number} starting at {start_time} would be out of order with "
                f"slot {neighbour.slot_number} starting at {neighbour.start_time}"
            ),
        )


@router.get("/", response_model=list[TimeSlotOut])
def list_time_slots(db: Session = Depends(get_db)) -> list[TimeSlotOut]:
    return list(db.execute(select(TimeSlot).order_by(TimeSlot.slot_number)).scalars())


@router.get("/layout", response_model=DayLayoutOut)
def get_day_layout(
    db: Session = Depends(get_db),
    policy: SessionPolicy = Depends(get_session_policy),
) -> DayLayoutOut:
    slots = list(db.execute(select(TimeSlot).order_by(TimeSlot.slot_number)).scalars())
    lunch_start, lunch_end = policy.lunch_break
    lunch_end_minutes = parse_time_to_minutes(lunch_end)
    after_lunch = next(
        (item.slot_number for item in slots if parse_time_to_minutes(item.start_time) >= lunch_end_minutes),
        None,
    )
    return DayLayoutOut(
        slots=[TimeSlotOut.model_validate(item) for item in slots],
        sessions=[
            SessionWindowOut(name=item.name, start_slot_number=item.start, end_slot_number=item.end)
            for item in policy.sessions
        ],
        lunch_break_start=lunch_start,
        lunch_break_end=lunch_end,
        lunch_break_before_slot=after_lunch,
    )


@router.post("/", response_model=TimeSlotOut, status_code=status.HTTP_201_CREATED)
def create_time_slot(payload: TimeSlotCreate, db: Session = Depends(get_db)) -> TimeSlotOut:
    if _slot_number_taken(db, payload.slot_number):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Slot number already exists")
    _require_ordered(db, payload.slot_number, payload.start_time)
    slot = TimeSlot(**payload.model_dump())
    db.add(slot)
    db.commit()
    db.refresh(slot)
    return slot


@router.put("/{slot_id}", response_model=TimeSlotOut)
def update_time_slot(slot_id: str, payload: TimeSlotUpdate, db: Session = Depends(get_db)) -> TimeSlotOut:
    slot = db.get(TimeSlot, slot_id)
    if slot is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Time slot not found")

    data = merged_update(slot, payload.model_dump(exclude_unset=True), TimeSlotBase)
    if "slot_number" in data and _slot_number_taken(db, data["slot_number"], exclude_id=slot_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Slot number already exists")
    _require_ordered(
        db,
        data.get("slot_number", slot.slot_number),
        data.get("start_time", slot.start_time),
        exclude_id=slot_id,
    )

    for key, value in data.items():
        setattr(slot, key, value)
    db.commit()
    db.refresh(slot)
    return slot


@router.delete("/{slot_id}")
def delete_time_slot(slot_id: str, db: Session = Depends(get_db)) -> dict:
    slot = db.get(TimeSlot, slot_id)
    if slot is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Time slot not found")
    if has_active_entries(db, TimetableEntry.time_slot_id, slot_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Time slot is used by active timetable entries",
        )
    db.delete(slot)
    db.commit()
    return {"success": True}
