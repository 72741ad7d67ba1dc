from datetime import datetime

from pydantic import BaseModel, Field


class TimetableEntryCreate(BaseModel):
    section_id: str = Field(min_length=1, max_length=36)
    course_id: str = Field(min_length=1, max_length=36)
    faculty_id: str | None = Field(default=None, max_length=36)
    classroom_id: str | None = Field(default=None, max_length=36)
    day_of_week: int = Field(ge=0, le=6)
    start_slot_id: str = Field(min_length=1, max_length=36)
    duration_hours: int | None = Field(default=None, ge=1, le=8)


class TimetableEntryOut(BaseModel):
    id: str
    section_id: str
    classroom_id: str | None = None
    faculty_id: str | None = None
    course_id: str | None = None
    time_slot_id: str
    day_of_week: int
    is_active: bool
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class TimetableEntryDetailOut(TimetableEntryOut):
    day: str
    slot_number: int | None = None
    start_time: str | None = None
    end_time: str | None = None
    section_name: str | None = None
    course_code: str | None = None
    course_name: str | None = None
    faculty_name: str | None = None
    classroom_name: str | None = None


class PlannedEntryOut(BaseModel):
    section_id: str
    course_id: str
    faculty_id: str | None = None
    classroom_id: str | None = None
    day_of_week: int
    time_slot_id: str
    slot_number: int


class AllocationCheckOut(BaseModel):
    accepted: bool
    duration_hours: int
    day: str
    entries: list[PlannedEntryOut]


class AllocationOut(BaseModel):
    duration_hours: int
    day: str
    entries: list[TimetableEntryOut]
