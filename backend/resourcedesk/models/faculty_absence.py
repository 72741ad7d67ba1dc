import uuid
from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from resourcedesk.db.base import Base


class FacultyAbsence(Base):
    __tablename__ = "faculty_absences"
    __table_args__ = (
        UniqueConstraint("faculty_id", "absence_date", name="uq_faculty_absences_faculty_date"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    faculty_id: Mapped[str] = mapped_column(String(36), index=True, nullable=False)
    absence_date: Mapped[date] = mapped_column(Date, nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    substitute_faculty_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    is_processed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
