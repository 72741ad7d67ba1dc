from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from resourcedesk.api.deps import get_db
from resourcedesk.models.course import Course
from resourcedesk.models.department import Department
from resourcedesk.models.faculty import Faculty
from resourcedesk.models.section import Section
from resourcedesk.api.updates import merged_update
from resourcedesk.schemas.department import DepartmentBase, DepartmentCreate, DepartmentOut, DepartmentUpdate

router = APIRouter()


@router.get("/", response_model=list[DepartmentOut])
def list_departments(db: Session = Depends(get_db)) -> list[DepartmentOut]:
    return list(db.execute(select(Department).order_by(Department.code)).scalars())


@router.post("/", response_model=DepartmentOut, status_code=status.HTTP_201_CREATED)
def create_department(payload: DepartmentCreate, db: Session = Depends(get_db)) -> DepartmentOut:
    existing = db.execute(select(Department).where(Department.code == payload.code)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Department code already exists")
    department = Department(**payload.model_dump())
    db.add(department)
    db.commit()
    db.refresh(department)
    return department


@router.put("/{department_id}", response_model=DepartmentOut)
def update_department(department_id: str, payload: DepartmentUpdate, db: Session = Depends(get_db)) -> DepartmentOut:
    department = db.get(Department, department_id)
    if department is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Department not found")

    data = merged_update(department, payload.model_dump(exclude_unset=True), DepartmentBase)
    if "code" in data:
        existing = db.execute(
            select(Department).where(Department.code == data["code"], Department.id != department_id)
        ).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Department code already exists")

    for key, value in data.items():
        setattr(department, key, value)
    db.commit()
    db.refresh(department)
    return department


@router.delete("/{department_id}")
def delete_department(department_id: str, db: Session = Depends(get_db)) -> dict:
    department = db.get(Department, department_id)
    if department is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Department not found")

    for model in (Section, Faculty, Course):
        if db.execute(select(model.id).where(model.department_id == department_id).limit(1)).first() is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Department is still referenced by {model.__tablename__}",
            )
    db.delete(department)
    db.commit()
    return {"success": True}
