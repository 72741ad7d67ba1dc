from pydantic import BaseModel, Field, field_validator, model_validator

from resourcedesk.core.timeutils import normalize_time, parse_time_to_minutes


class TimeSlotBase(BaseModel):
    slot_number: int = Field(ge=1, le=48)
    start_time: str
    end_time: str

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        return normalize_time(value)

    @model_validator(mode="after")
    def validate_order(self) -> "TimeSlotBase":
        if parse_time_to_minutes(self.end_time) <= parse_time_to_minutes(self.start_time):
            raise ValueError("end_time must be after start_time")
        return self


class TimeSlotCreate(TimeSlotBase):
    pass


class TimeSlotUpdate(BaseModel):
    slot_number: int | None = Field(default=None, ge=1, le=48)
    start_time: str | None = None
    end_time: str | None = None

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str | None) -> str | None:
        return normalize_time(value) if value is not None else None


class TimeSlotOut(TimeSlotBase):
    id: str

    model_config = {"from_attributes": True}


class SessionWindowOut(BaseModel):
    name: str
    start_slot_number: int
    end_slot_number: int


class DayLayoutOut(BaseModel):
    slots: list[TimeSlotOut]
    sessions: list[SessionWindowOut]
    lunch_break_start: str
    lunch_break_end: str
    # Slot number the lunch break is drawn before, if any slot starts after it.
    lunch_break_before_slot: int | None = None
