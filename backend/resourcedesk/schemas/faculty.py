from pydantic import BaseModel, EmailStr, Field


class FacultyBase(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    designation: str | None = Field(default=None, max_length=200)
    specialization: str | None = Field(default=None, max_length=200)
    department_id: str | None = Field(default=None, max_length=36)
    is_available: bool = True


class FacultyCreate(FacultyBase):
    pass


class FacultyUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    email: EmailStr | None = None
    designation: str | None = Field(default=None, max_length=200)
    specialization: str | None = Field(default=None, max_length=200)
    department_id: str | None = Field(default=None, max_length=36)
    is_available: bool | None = None


class FacultyOut(FacultyBase):
    id: str

    model_config = {"from_attributes": True}
