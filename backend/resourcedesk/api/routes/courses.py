from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from resourcedesk.api.deps import get_db
from resourcedesk.models.course import Course
from resourcedesk.models.timetable_entry import TimetableEntry
from resourcedesk.api.updates import merged_update
from resourcedesk.schemas.course import CourseBase, CourseCreate, CourseOut, CourseUpdate
from resourcedesk.services.timetable_store import has_active_entries

router = APIRouter()


@router.get("/", response_model=list[CourseOut])
def list_courses(db: Session = Depends(get_db)) -> list[CourseOut]:
    return list(db.execute(select(Course).order_by(Course.code)).scalars())


@router.post("/", response_model=CourseOut, status_code=status.HTTP_201_CREATED)
def create_course(payload: CourseCreate, db: Session = Depends(get_db)) -> CourseOut:
    existing = db.execute(select(Course).where(Course.code == payload.code)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Course code already exists")
    course = Course(**payload.model_dump())
    db.add(course)
    db.commit()
    db.refresh(course)
    return course


@router.put("/{course_id}", response_model=CourseOut)
def update_course(course_id: str, payload: CourseUpdate, db: Session = Depends(get_db)) -> CourseOut:
    course = db.get(Course, course_id)
    if course is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")

    data = merged_update(course, payload.model_dump(exclude_unset=True), CourseBase)
    if "code" in data:
        existing = db.execute(select(Course).where(Course.code == data["code"], Course.id != course_id)).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Course code already exists")

    # Existing entries keep the slots they were booked with.
    for key, value in data.items():
        setattr(course, key, value)
    db.commit()
    db.refresh(course)
    return course


@router.delete("/{course_id}")
def delete_course(course_id: str, db: Session = Depends(get_db)) -> dict:
    course = db.get(Course, course_id)
    if course is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
    if has_active_entries(db, TimetableEntry.course_id, course_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Course is scheduled in active timetable entries",
        )
    db.delete(course)
    db.commit()
    return {"success": True}
