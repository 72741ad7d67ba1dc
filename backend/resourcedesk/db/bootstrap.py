from __future__ import annotations

import logging

from sqlalchemy import Engine, func, inspect, select
from sqlalchemy.orm import Session

from resourcedesk.db.base import Base
import resourcedesk.models  # noqa: F401
from resourcedesk.models.time_slot import TimeSlot

logger = logging.getLogger(__name__)

DEFAULT_TIME_SLOTS: list[tuple[int, str, str]] = [
    (1, "10:00", "11:00"),
    (2, "11:00", "12:00"),
    (3, "12:00", "13:00"),
    (4, "14:00", "15:00"),
    (5, "15:00", "16:00"),
    (6, "16:00", "17:00"),
]

REQUIRED_TABLES = {
    "departments",
    "faculty",
    "classrooms",
    "courses",
    "sections",
    "time_slots",
    "timetable_entries",
    "faculty_absences",
    "reallocation_logs",
}


def missing_tables(bind) -> list[str]:
    table_names = set(inspect(bind).get_table_names())
    return sorted(REQUIRED_TABLES - table_names)


def seed_default_time_slots(db: Session) -> int:
    existing = db.execute(select(func.count()).select_from(TimeSlot)).scalar_one()
    if existing:
        return 0
    for slot_number, start_time, end_time in DEFAULT_TIME_SLOTS:
        db.add(TimeSlot(slot_number=slot_number, start_time=start_time, end_time=end_time))
    db.commit()
    logger.info("Seeded %d default time slots", len(DEFAULT_TIME_SLOTS))
    return len(DEFAULT_TIME_SLOTS)


def ensure_schema(engine: Engine, *, seed_time_slots: bool = True) -> None:
    try:
        Base.metadata.create_all(bind=engine)
        missing = missing_tables(engine)
        if missing:
            raise RuntimeError(f"Missing required tables: {', '.join(missing)}")
        if seed_time_slots:
            with Session(engine) as db:
                seed_default_time_slots(db)
    except Exception as exc:  # pragma: no cover - runtime environment dependent
        logger.exception("Schema bootstrap failed")
        raise RuntimeError("Schema bootstrap failed") from exc
