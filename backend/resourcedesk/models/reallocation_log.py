import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from resourcedesk.db.base import Base


class ReallocationLog(Base):
    __tablename__ = "reallocation_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    original_entry_id: Mapped[str | None] = mapped_column(String(36), index=True, nullable=True)
    original_faculty_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    substitute_faculty_id: Mapped[str | None] = mapped_column(String(36), index=True, nullable=True)
    original_classroom_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    new_classroom_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    reallocation_date: Mapped[date] = mapped_column(Date, index=True, nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
