from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from resourcedesk.api.deps import get_db
from resourcedesk.core.timeutils import day_name
from resourcedesk.models.classroom import Classroom
from resourcedesk.models.course import Course
from resourcedesk.models.faculty import Faculty
from resourcedesk.models.faculty_absence import FacultyAbsence
from resourcedesk.models.timetable_entry import TimetableEntry
from resourcedesk.schemas.dashboard import DashboardSummaryOut
from resourcedesk.services.substitute_resolver import weekday_index

router = APIRouter()


def _count(db: Session, model, *conditions) -> int:
    query = select(func.count()).select_from(model)
    if conditions:
        query = query.where(*conditions)
    return int(db.execute(query).scalar_one())


@router.get("/dashboard/summary", response_model=DashboardSummaryOut)
def dashboard_summary(
    on: date | None = Query(default=None),
    db: Session = Depends(get_db),
) -> DashboardSummaryOut:
    today = on or date.today()
    today_index = weekday_index(today)
    return DashboardSummaryOut(
        faculty_count=_count(db, Faculty),
        classroom_count=_count(db, Classroom),
        available_classroom_count=_count(db, Classroom, Classroom.is_available.is_(True)),
        course_count=_count(db, Course),
        pending_absence_count=_count(db, FacultyAbsence, FacultyAbsence.is_processed.is_(False)),
        today_class_count=_count(
            db,
            TimetableEntry,
            TimetableEntry.day_of_week == today_index,
            TimetableEntry.is_active.is_(True),
        ),
        today=day_name(today_index),
    )
