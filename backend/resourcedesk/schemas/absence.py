from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator

from resourcedesk.schemas.timetable import TimetableEntryDetailOut


class FacultyAbsenceCreate(BaseModel):
    faculty_id: str = Field(min_length=1, max_length=36)
    absence_date: date
    reason: str | None = Field(default=None, max_length=1000)

    @field_validator("reason")
    @classmethod
    def normalize_reason(cls, value: str | None) -> str | None:
        if value is None:
            return None
        trimmed = value.strip()
        return trimmed or None


class FacultyAbsenceOut(BaseModel):
    id: str
    faculty_id: str
    faculty_name: str | None = None
    absence_date: date
    reason: str | None = None
    substitute_faculty_id: str | None = None
    substitute_faculty_name: str | None = None
    is_processed: bool
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class SubstituteOut(BaseModel):
    id: str
    name: str


class SubstitutePreviewOut(BaseModel):
    absence_id: str
    faculty_id: str
    absence_date: date
    day_of_week: int
    day: str
    affected_classes: list[TimetableEntryDetailOut]
    available_substitutes: list[SubstituteOut]


class AbsenceProcessRequest(BaseModel):
    substitute_faculty_id: str = Field(min_length=1, max_length=36)


class ReallocationLogOut(BaseModel):
    id: str
    original_entry_id: str | None = None
    original_faculty_id: str | None = None
    substitute_faculty_id: str | None = None
    original_classroom_id: str | None = None
    new_classroom_id: str | None = None
    reallocation_date: date
    reason: str | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class AbsenceProcessOut(BaseModel):
    absence: FacultyAbsenceOut
    reallocations: list[ReallocationLogOut]
