import uuid
from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from resourcedesk.db.base import Base


class Section(Base):
    __tablename__ = "sections"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    section_letter: Mapped[str] = mapped_column(String(5), nullable=False)
    department_id: Mapped[str] = mapped_column(String(36), index=True, nullable=False)
    # Section advisor, not the teaching faculty of any particular class.
    faculty_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    max_students: Mapped[int | None] = mapped_column(Integer, nullable=True, default=60)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
