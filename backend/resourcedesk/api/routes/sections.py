from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from resourcedesk.api.deps import get_db
from resourcedesk.models.department import Department
from resourcedesk.models.section import Section
from resourcedesk.models.timetable_entry import TimetableEntry
from resourcedesk.api.updates import merged_update
from resourcedesk.schemas.section import SectionBase, SectionCreate, SectionOut, SectionUpdate
from resourcedesk.services.timetable_store import has_active_entries

router = APIRouter()


def _require_department(db: Session, department_id: str) -> None:
    if db.get(Department, department_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Department not found")


@router.get("/", response_model=list[SectionOut])
def list_sections(department_id: str | None = Query(default=None), db: Session = Depends(get_db)) -> list[SectionOut]:
    query = select(Section)
    if department_id:
        query = query.where(Section.department_id == department_id)
    return list(db.execute(query.order_by(Section.name, Section.section_letter)).scalars())


@router.post("/", response_model=SectionOut, status_code=status.HTTP_201_CREATED)
def create_section(payload: SectionCreate, db: Session = Depends(get_db)) -> SectionOut:
    _require_department(db, payload.department_id)
    section = Section(**payload.model_dump())
    db.add(section)
    db.commit()
    db.refresh(section)
    return section


@router.put("/{section_id}", response_model=SectionOut)
def update_section(section_id: str, payload: SectionUpdate, db: Session = Depends(get_db)) -> SectionOut:
    section = db.get(Section, section_id)
    if section is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Section not found")

    data = merged_update(section, payload.model_dump(exclude_unset=True), SectionBase)
    if data.get("department_id"):
        _require_department(db, data["department_id"])

    for key, value in data.items():
        setattr(section, key, value)
    db.commit()
    db.refresh(section)
    return section


@router.delete("/{section_id}")
def delete_section(section_id: str, db: Session = Depends(get_db)) -> dict:
    section = db.get(Section, section_id)
    if section is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Section not found")
    if has_active_entries(db, TimetableEntry.section_id, section_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Section has active timetable entries",
        )
    db.delete(section)
    db.commit()
    return {"success": True}
