from pydantic import BaseModel, Field, field_validator


class SectionBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    section_letter: str = Field(min_length=1, max_length=5)
    department_id: str = Field(min_length=1, max_length=36)
    faculty_id: str | None = Field(default=None, max_length=36)
    max_students: int | None = Field(default=60, ge=1, le=1000)

    @field_validator("section_letter")
    @classmethod
    def normalize_letter(cls, value: str) -> str:
        return value.strip().upper()


class SectionCreate(SectionBase):
    pass


class SectionUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    section_letter: str | None = Field(default=None, min_length=1, max_length=5)
    department_id: str | None = Field(default=None, min_length=1, max_length=36)
    faculty_id: str | None = Field(default=None, max_length=36)
    max_students: int | None = Field(default=None, ge=1, le=1000)


class SectionOut(SectionBase):
    id: str

    model_config = {"from_attributes": True}
