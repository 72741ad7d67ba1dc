from pydantic import BaseModel, Field


class ClassroomBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    building: str = Field(min_length=1, max_length=200)
    capacity: int = Field(default=30, ge=1, le=1000)
    has_projector: bool = False
    has_ac: bool = False
    is_available: bool = True


class ClassroomCreate(ClassroomBase):
    pass


class ClassroomUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    building: str | None = Field(default=None, min_length=1, max_length=200)
    capacity: int | None = Field(default=None, ge=1, le=1000)
    has_projector: bool | None = None
    has_ac: bool | None = None
    is_available: bool | None = None


class ClassroomOut(ClassroomBase):
    id: str

    model_config = {"from_attributes": True}
