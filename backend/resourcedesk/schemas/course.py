from pydantic import BaseModel, Field, field_validator


class CourseBase(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    name: str = Field(min_length=1, max_length=200)
    credits: int | None = Field(default=3, ge=0, le=40)
    semester: int | None = Field(default=None, ge=1, le=20)
    department_id: str | None = Field(default=None, max_length=36)
    duration_hours: int = Field(default=1, ge=1, le=8)
    is_lab: bool = False

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str) -> str:
        return value.strip().upper()


class CourseCreate(CourseBase):
    pass


class CourseUpdate(BaseModel):
    code: str | None = Field(default=None, min_length=1, max_length=50)
    name: str | None = Field(default=None, min_length=1, max_length=200)
    credits: int | None = Field(default=None, ge=0, le=40)
    semester: int | None = Field(default=None, ge=1, le=20)
    department_id: str | None = Field(default=None, max_length=36)
    duration_hours: int | None = Field(default=None, ge=1, le=8)
    is_lab: bool | None = None

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str | None) -> str | None:
        return value.strip().upper() if value is not None else None


class CourseOut(CourseBase):
    id: str

    model_config = {"from_attributes": True}
