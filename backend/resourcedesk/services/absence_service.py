from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from resourcedesk.core.exceptions import AbsenceError, ResourceNotFoundError
from resourcedesk.models.faculty import Faculty
from resourcedesk.models.faculty_absence import FacultyAbsence
from resourcedesk.models.reallocation_log import ReallocationLog
from resourcedesk.schemas.absence import FacultyAbsenceCreate
from resourcedesk.services.substitute_resolver import (
    MatchMode,
    SubstituteResolution,
    SubstituteResolver,
    weekday_index,
)
from resourcedesk.services.timetable_store import load_active_entries, load_faculty_roster

logger = logging.getLogger(__name__)

DEFAULT_REALLOCATION_REASON = "Faculty absence"


def get_absence(db: Session, absence_id: str) -> FacultyAbsence:
    absence = db.get(FacultyAbsence, absence_id)
    if absence is None:
        raise ResourceNotFoundError("FacultyAbsence", absence_id)
    return absence


def record_absence(db: Session, payload: FacultyAbsenceCreate) -> FacultyAbsence:
    if db.get(Faculty, payload.faculty_id) is None:
        raise ResourceNotFoundError("Faculty", payload.faculty_id)

    duplicate = db.execute(
        select(FacultyAbsence).where(
            FacultyAbsence.faculty_id == payload.faculty_id,
            FacultyAbsence.absence_date == payload.absence_date,
        )
    ).scalar_one_or_none()
    if duplicate is not None:
        raise AbsenceError(
            "Absence already marked for this date",
            details={"absence_id": duplicate.id, "absence_date": payload.absence_date.isoformat()},
        )

    absence = FacultyAbsence(
        faculty_id=payload.faculty_id,
        absence_date=payload.absence_date,
        reason=payload.reason,
        is_processed=False,
    )
    db.add(absence)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise AbsenceError("Absence already marked for this date") from exc
    db.refresh(absence)
    logger.info("Absence recorded for faculty %s on %s", absence.faculty_id, absence.absence_date.isoformat())
    return absence


def resolve_substitutes(db: Session, absence: FacultyAbsence, *, match_mode: MatchMode) -> SubstituteResolution:
    resolver = SubstituteResolver(
        entries=load_active_entries(db, day_of_week=weekday_index(absence.absence_date)),
        faculty=load_faculty_roster(db),
        match_mode=match_mode,
    )
    return resolver.resolve(absence.faculty_id, absence.absence_date)


def process_absence(
    db: Session,
    absence_id: str,
    substitute_faculty_id: str,
    *,
    match_mode: MatchMode,
) -> tuple[FacultyAbsence, list[ReallocationLog]]:
    absence = get_absence(db, absence_id)
    if absence.is_processed:
        raise AbsenceError(
            "Absence has already been processed",
            details={"absence_id": absence.id, "substitute_faculty_id": absence.substitute_faculty_id},
        )
    if db.get(Faculty, substitute_faculty_id) is None:
        raise ResourceNotFoundError("Faculty", substitute_faculty_id)

    resolution = resolve_substitutes(db, absence, match_mode=match_mode)
    if all(item.id != substitute_faculty_id for item in resolution.available_substitutes):
        raise AbsenceError(
            "Selected faculty is not available to substitute at the affected times",
            details={
                "substitute_faculty_id": substitute_faculty_id,
                "available_substitute_ids": [item.id for item in resolution.available_substitutes],
            },
        )

    # Claim the absence; a concurrent call that got here first leaves nothing to update.
    claimed = db.execute(
        update(FacultyAbsence)
        .where(FacultyAbsence.id == absence.id, FacultyAbsence.is_processed.is_(False))
        .values(is_processed=True, substitute_faculty_id=substitute_faculty_id)
        .execution_options(synchronize_session=False)
    ).rowcount
    if claimed != 1:
        db.rollback()
        logger.warning("Absence %s was processed concurrently; discarding reallocation", absence.id)
        raise AbsenceError(
            "Absence has already been processed",
            details={"absence_id": absence.id},
        )

    reason = absence.reason or DEFAULT_REALLOCATION_REASON
    logs = [
        ReallocationLog(
            original_entry_id=entry.id,
            original_faculty_id=absence.faculty_id,
            substitute_faculty_id=substitute_faculty_id,
            original_classroom_id=entry.classroom_id,
            reallocation_date=absence.absence_date,
            reason=reason,
        )
        for entry in resolution.affected_classes
    ]
    db.add_all(logs)
    db.commit()
    db.refresh(absence)
    for item in logs:
        db.refresh(item)

    logger.info(
        "Absence %s processed: %s substitutes for %s on %s, %d affected classes",
        absence.id,
        substitute_faculty_id,
        absence.faculty_id,
        absence.absence_date.isoformat(),
        len(logs),
    )
    return absence, logs
