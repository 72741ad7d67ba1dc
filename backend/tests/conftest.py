import os

# Must be set before the app module builds its engine and settings.
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["SEED_DEFAULT_TIME_SLOTS"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from resourcedesk.api.deps import get_db
from resourcedesk.db.base import Base
from resourcedesk.db.bootstrap import seed_default_time_slots
from resourcedesk.main import app


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()
    seed_default_time_slots(db)
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(engine, db_session):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture()
def slots(client):
    """Default slots keyed by slot number."""
    response = client.get("/api/time-slots/")
    assert response.status_code == 200
    return {item["slot_number"]: item["id"] for item in response.json()}


@pytest.fixture()
def campus(client):
    """A department with two sections, three faculty, two classrooms and two courses."""
    department = client.post("/api/departments/", json={"code": "cse", "name": "Computer Science"})
    assert department.status_code == 201
    department_id = department.json()["id"]

    def create(path, payload):
        response = client.post(path, json=payload)
        assert response.status_code == 201, response.text
        return response.json()["id"]

    return {
        "department": department_id,
        "section_a": create("/api/sections/", {"name": "CSE 2nd Year", "section_letter": "a", "department_id": department_id}),
        "section_b": create("/api/sections/", {"name": "CSE 3rd Year", "section_letter": "b", "department_id": department_id}),
        "faculty_f": create("/api/faculty/", {"name": "Farah Iqbal", "email": "farah@example.com", "department_id": department_id}),
        "faculty_g": create("/api/faculty/", {"name": "Gopal Rao", "email": "gopal@example.com", "department_id": department_id}),
        "faculty_h": create("/api/faculty/", {"name": "Hana Sato", "email": "hana@example.com", "department_id": department_id}),
        "room_101": create("/api/classrooms/", {"name": "R101", "building": "Main Block"}),
        "room_lab": create("/api/classrooms/", {"name": "Lab 2", "building": "Annex"}),
        "course_theory": create("/api/courses/", {"code": "cs201", "name": "Data Structures", "duration_hours": 1}),
        "course_lab": create(
            "/api/courses/",
            {"code": "cs201l", "name": "Data Structures Lab", "duration_hours": 2, "is_lab": True},
        ),
    }
