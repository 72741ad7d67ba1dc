from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from resourcedesk.api.deps import get_db
from resourcedesk.core.config import Settings, get_settings
from resourcedesk.core.timeutils import day_name
from resourcedesk.models.faculty import Faculty
from resourcedesk.models.faculty_absence import FacultyAbsence
from resourcedesk.models.reallocation_log import ReallocationLog
from resourcedesk.schemas.absence import (
    AbsenceProcessOut,
    AbsenceProcessRequest,
    FacultyAbsenceCreate,
    FacultyAbsenceOut,
    ReallocationLogOut,
    SubstituteOut,
    SubstitutePreviewOut,
)
from resourcedesk.services.absence_service import get_absence, process_absence, record_absence, resolve_substitutes
from resourcedesk.services.timetable_store import describe_entries

router = APIRouter()


def _hydrate_absences(db: Session, absences: list[FacultyAbsence]) -> list[FacultyAbsenceOut]:
    if not absences:
        return []
    faculty_ids: set[str] = set()
    for item in absences:
        faculty_ids.add(item.faculty_id)
        if item.substitute_faculty_id:
            faculty_ids.add(item.substitute_faculty_id)
    names = {
        row.id: row.name
        for row in db.execute(select(Faculty).where(Faculty.id.in_(faculty_ids))).scalars()
    }
    return [
        FacultyAbsenceOut(
            id=item.id,
            faculty_id=item.faculty_id,
            faculty_name=names.get(item.faculty_id),
            absence_date=item.absence_date,
            reason=item.reason,
            substitute_faculty_id=item.substitute_faculty_id,
            substitute_faculty_name=names.get(item.substitute_faculty_id) if item.substitute_faculty_id else None,
            is_processed=item.is_processed,
            created_at=item.created_at,
        )
        for item in absences
    ]


@router.get("/absences", response_model=list[FacultyAbsenceOut])
def list_absences(
    faculty_id: str | None = Query(default=None),
    is_processed: bool | None = Query(default=None),
    db: Session = Depends(get_db),
) -> list[FacultyAbsenceOut]:
    query = select(FacultyAbsence)
    if faculty_id:
        query = query.where(FacultyAbsence.faculty_id == faculty_id)
    if is_processed is not None:
        query = query.where(FacultyAbsence.is_processed.is_(is_processed))
    query = query.order_by(FacultyAbsence.absence_date.desc(), FacultyAbsence.created_at.desc())
    return _hydrate_absences(db, list(db.execute(query).scalars()))


@router.post("/absences", response_model=FacultyAbsenceOut, status_code=status.HTTP_201_CREATED)
def mark_absence(payload: FacultyAbsenceCreate, db: Session = Depends(get_db)) -> FacultyAbsenceOut:
    absence = record_absence(db, payload)
    return _hydrate_absences(db, [absence])[0]


@router.get("/absences/{absence_id}", response_model=FacultyAbsenceOut)
def read_absence(absence_id: str, db: Session = Depends(get_db)) -> FacultyAbsenceOut:
    return _hydrate_absences(db, [get_absence(db, absence_id)])[0]


@router.get("/absences/{absence_id}/substitutes", response_model=SubstitutePreviewOut)
def preview_substitutes(
    absence_id: str,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> SubstitutePreviewOut:
    absence = get_absence(db, absence_id)
    resolution = resolve_substitutes(db, absence, match_mode=settings.substitute_match_mode)
    return SubstitutePreviewOut(
        absence_id=absence.id,
        faculty_id=absence.faculty_id,
        absence_date=absence.absence_date,
        day_of_week=resolution.day_of_week,
        day=day_name(resolution.day_of_week),
        affected_classes=describe_entries(db, resolution.affected_classes),
        available_substitutes=[
            SubstituteOut(id=item.id, name=item.name) for item in resolution.available_substitutes
        ],
    )


@router.post("/absences/{absence_id}/process", response_model=AbsenceProcessOut)
def process(
    absence_id: str,
    payload: AbsenceProcessRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AbsenceProcessOut:
    absence, logs = process_absence(
        db,
        absence_id,
        payload.substitute_faculty_id,
        match_mode=settings.substitute_match_mode,
    )
    return AbsenceProcessOut(
        absence=_hydrate_absences(db, [absence])[0],
        reallocations=[ReallocationLogOut.model_validate(item) for item in logs],
    )


@router.get("/reallocations", response_model=list[ReallocationLogOut])
def list_reallocations(
    reallocation_date: date | None = Query(default=None),
    faculty_id: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> list[ReallocationLogOut]:
    query = select(ReallocationLog)
    if reallocation_date is not None:
        query = query.where(ReallocationLog.reallocation_date == reallocation_date)
    if faculty_id:
        query = query.where(
            (ReallocationLog.original_faculty_id == faculty_id)
            | (ReallocationLog.substitute_faculty_id == faculty_id)
        )
    query = query.order_by(ReallocationLog.reallocation_date.desc(), ReallocationLog.created_at.desc())
    return list(db.execute(query).scalars())
