from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from resourcedesk.api.deps import get_db
from resourcedesk.models.faculty import Faculty
from resourcedesk.models.faculty_absence import FacultyAbsence
from resourcedesk.models.timetable_entry import TimetableEntry
from resourcedesk.api.updates import merged_update
from resourcedesk.schemas.faculty import FacultyBase, FacultyCreate, FacultyOut, FacultyUpdate
from resourcedesk.schemas.timetable import TimetableEntryDetailOut
from resourcedesk.services.timetable_store import describe_entries, has_active_entries

router = APIRouter()


def _email_taken(db: Session, email: str, *, exclude_id: str | None = None) -> bool:
    query = select(Faculty.id).where(func.lower(Faculty.email) == email.lower())
    if exclude_id is not None:
        query = query.where(Faculty.id != exclude_id)
    return db.execute(query).first() is not None


@router.get("/", response_model=list[FacultyOut])
def list_faculty(
    available: bool | None = Query(default=None),
    department_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> list[FacultyOut]:
    query = select(Faculty)
    if available is not None:
        query = query.where(Faculty.is_available.is_(available))
    if department_id:
        query = query.where(Faculty.department_id == department_id)
    return list(db.execute(query.order_by(Faculty.name)).scalars())


@router.post("/", response_model=FacultyOut, status_code=status.HTTP_201_CREATED)
def create_faculty(payload: FacultyCreate, db: Session = Depends(get_db)) -> FacultyOut:
    if _email_taken(db, payload.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Faculty email already exists")
    faculty = Faculty(**payload.model_dump())
    db.add(faculty)
    db.commit()
    db.refresh(faculty)
    return faculty


@router.get("/{faculty_id}", response_model=FacultyOut)
def get_faculty(faculty_id: str, db: Session = Depends(get_db)) -> FacultyOut:
    faculty = db.get(Faculty, faculty_id)
    if faculty is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Faculty not found")
    return faculty


@router.get("/{faculty_id}/schedule", response_model=list[TimetableEntryDetailOut])
def get_faculty_schedule(faculty_id: str, db: Session = Depends(get_db)) -> list[TimetableEntryDetailOut]:
    if db.get(Faculty, faculty_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Faculty not found")
    entries = db.execute(
        select(TimetableEntry).where(
            TimetableEntry.faculty_id == faculty_id,
            TimetableEntry.is_active.is_(True),
        )
    ).scalars()
    return describe_entries(db, entries)


@router.put("/{faculty_id}", response_model=FacultyOut)
def update_faculty(faculty_id: str, payload: FacultyUpdate, db: Session = Depends(get_db)) -> FacultyOut:
    faculty = db.get(Faculty, faculty_id)
    if faculty is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Faculty not found")

    data = merged_update(faculty, payload.model_dump(exclude_unset=True), FacultyBase)
    if data.get("email") and _email_taken(db, data["email"], exclude_id=faculty_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Faculty email already exists")

    for key, value in data.items():
        setattr(faculty, key, value)
    db.commit()
    db.refresh(faculty)
    return faculty


@router.delete("/{faculty_id}")
def delete_faculty(faculty_id: str, db: Session = Depends(get_db)) -> dict:
    faculty = db.get(Faculty, faculty_id)
    if faculty is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Faculty not found")
    if has_active_entries(db, TimetableEntry.faculty_id, faculty_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Faculty is assigned to active timetable entries",
        )
    pending = db.execute(
        select(FacultyAbsence.id).where(
            FacultyAbsence.faculty_id == faculty_id,
            FacultyAbsence.is_processed.is_(False),
        ).limit(1)
    ).first()
    if pending is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Faculty has pending absences")
    db.delete(faculty)
    db.commit()
    return {"success": True}
