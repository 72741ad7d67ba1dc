from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from resourcedesk.api.deps import get_db
from resourcedesk.models.classroom import Classroom
from resourcedesk.models.timetable_entry import TimetableEntry
from resourcedesk.api.updates import merged_update
from resourcedesk.schemas.classroom import ClassroomBase, ClassroomCreate, ClassroomOut, ClassroomUpdate
from resourcedesk.services.timetable_store import has_active_entries

router = APIRouter()


@router.get("/", response_model=list[ClassroomOut])
def list_classrooms(
    available: bool | None = Query(default=None),
    db: Session = Depends(get_db),
) -> list[ClassroomOut]:
    query = select(Classroom)
    if available is not None:
        query = query.where(Classroom.is_available.is_(available))
    return list(db.execute(query.order_by(Classroom.name)).scalars())


@router.post("/", response_model=ClassroomOut, status_code=status.HTTP_201_CREATED)
def create_classroom(payload: ClassroomCreate, db: Session = Depends(get_db)) -> ClassroomOut:
    existing = db.execute(select(Classroom).where(Classroom.name == payload.name)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Classroom name already exists")
    classroom = Classroom(**payload.model_dump())
    db.add(classroom)
    db.commit()
    db.refresh(classroom)
    return classroom


@router.put("/{classroom_id}", response_model=ClassroomOut)
def update_classroom(classroom_id: str, payload: ClassroomUpdate, db: Session = Depends(get_db)) -> ClassroomOut:
    classroom = db.get(Classroom, classroom_id)
    if classroom is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Classroom not found")

    data = merged_update(classroom, payload.model_dump(exclude_unset=True), ClassroomBase)
    if "name" in data:
        existing = db.execute(
            select(Classroom).where(Classroom.name == data["name"], Classroom.id != classroom_id)
        ).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Classroom name already exists")

    for key, value in data.items():
        setattr(classroom, key, value)
    db.commit()
    db.refresh(classroom)
    return classroom


@router.delete("/{classroom_id}")
def delete_classroom(classroom_id: str, db: Session = Depends(get_db)) -> dict:
    classroom = db.get(Classroom, classroom_id)
    if classroom is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Classroom not found")
    if has_active_entries(db, TimetableEntry.classroom_id, classroom_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Classroom is assigned to active timetable entries",
        )
    db.delete(classroom)
    db.commit()
    return {"success": True}
