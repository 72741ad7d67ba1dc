import uuid
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from resourcedesk.db.base import Base


def _active_unique_index(name: str, column: str) -> Index:
    # Only active rows compete for a cell; NULL faculty/classroom never collide.
    return Index(
        name,
        "day_of_week",
        "time_slot_id",
        column,
        unique=True,
        postgresql_where=text("is_active"),
        sqlite_where=text("is_active = 1"),
    )


class TimetableEntry(Base):
    __tablename__ = "timetable_entries"
    __table_args__ = (
        CheckConstraint("day_of_week >= 0 AND day_of_week <= 6", name="ck_timetable_entries_day"),
        _active_unique_index("uq_timetable_entries_active_faculty", "faculty_id"),
        _active_unique_index("uq_timetable_entries_active_classroom", "classroom_id"),
        _active_unique_index("uq_timetable_entries_active_section", "section_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    section_id: Mapped[str] = mapped_column(String(36), index=True, nullable=False)
    classroom_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    faculty_id: Mapped[str | None] = mapped_column(String(36), index=True, nullable=True)
    course_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    time_slot_id: Mapped[str] = mapped_column(String(36), nullable=False)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
