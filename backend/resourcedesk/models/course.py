import uuid
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from resourcedesk.db.base import Base


class Course(Base):
    __tablename__ = "courses"
    __table_args__ = (
        CheckConstraint("duration_hours >= 1", name="ck_courses_duration_hours"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    code: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    credits: Mapped[int | None] = mapped_column(Integer, nullable=True, default=3)
    semester: Mapped[int | None] = mapped_column(Integer, nullable=True)
    department_id: Mapped[str | None] = mapped_column(String(36), index=True, nullable=True)
    duration_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_lab: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
