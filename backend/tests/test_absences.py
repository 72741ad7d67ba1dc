import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import sessionmaker

from resourcedesk.core.exceptions import AbsenceError
from resourcedesk.models.reallocation_log import ReallocationLog
from resourcedesk.services.absence_service import get_absence, process_absence

MONDAY = 1
ABSENCE_DATE = "2026-10-19"  # a Monday


def schedule(client, slots, campus, *, section, faculty, room, slot, day=MONDAY):
    response = client.post(
        "/api/timetable/entries",
        json={
            "section_id": campus[section],
            "course_id": campus["course_theory"],
            "faculty_id": campus[faculty],
            "classroom_id": campus[room],
            "day_of_week": day,
            "start_slot_id": slots[slot],
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["entries"][0]


def mark_absent(client, faculty_id, *, absence_date=ABSENCE_DATE, reason=None):
    payload = {"faculty_id": faculty_id, "absence_date": absence_date}
    if reason is not None:
        payload["reason"] = reason
    return client.post("/api/absences", json=payload)


def test_mark_absence_and_reject_duplicates(client, campus):
    created = mark_absent(client, campus["faculty_f"], reason="  Conference travel  ")
    assert created.status_code == 201
    body = created.json()
    assert body["faculty_name"] == "Farah Iqbal"
    assert body["reason"] == "Conference travel"
    assert body["is_processed"] is False

    duplicate = mark_absent(client, campus["faculty_f"])
    assert duplicate.status_code == 409
    assert duplicate.json()["message"] == "Absence already marked for this date"

    assert mark_absent(client, "missing-faculty").status_code == 404


def test_substitute_preview_excludes_busy_faculty(client, slots, campus):
    affected = schedule(client, slots, campus, section="section_a", faculty="faculty_f", room="room_101", slot=2)
    schedule(client, slots, campus, section="section_b", faculty="faculty_g", room="room_lab", slot=2)
    absence_id = mark_absent(client, campus["faculty_f"]).json()["id"]

    response = client.get(f"/api/absences/{absence_id}/substitutes")

    assert response.status_code == 200
    body = response.json()
    assert body["day_of_week"] == MONDAY
    assert body["day"] == "Monday"
    assert [item["id"] for item in body["affected_classes"]] == [affected["id"]]
    assert body["affected_classes"][0]["start_time"] == "11:00"
    assert [item["id"] for item in body["available_substitutes"]] == [campus["faculty_h"]]


def test_absence_without_classes_offers_every_available_colleague(client, slots, campus):
    schedule(client, slots, campus, section="section_a", faculty="faculty_f", room="room_101", slot=2, day=MONDAY + 1)
    client.put(f"/api/faculty/{campus['faculty_h']}", json={"is_available": False})
    absence_id = mark_absent(client, campus["faculty_f"]).json()["id"]

    body = client.get(f"/api/absences/{absence_id}/substitutes").json()

    assert body["affected_classes"] == []
    assert [item["name"] for item in body["available_substitutes"]] == ["Gopal Rao"]


def test_processing_assigns_substitute_and_logs_each_class(client, slots, campus):
    first = schedule(client, slots, campus, section="section_a", faculty="faculty_f", room="room_101", slot=1)
    second = schedule(client, slots, campus, section="section_b", faculty="faculty_f", room="room_lab", slot=4)
    absence_id = mark_absent(client, campus["faculty_f"]).json()["id"]

    response = client.post(
        f"/api/absences/{absence_id}/process",
        json={"substitute_faculty_id": campus["faculty_h"]},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["absence"]["is_processed"] is True
    assert body["absence"]["substitute_faculty_name"] == "Hana Sato"
    logs = body["reallocations"]
    assert {item["original_entry_id"] for item in logs} == {first["id"], second["id"]}
    assert {item["original_classroom_id"] for item in logs} == {campus["room_101"], campus["room_lab"]}
    assert all(item["reason"] == "Faculty absence" for item in logs)
    assert all(item["reallocation_date"] == ABSENCE_DATE for item in logs)

    again = client.post(
        f"/api/absences/{absence_id}/process",
        json={"substitute_faculty_id": campus["faculty_g"]},
    )
    assert again.status_code == 409

    listed = client.get("/api/reallocations", params={"reallocation_date": ABSENCE_DATE}).json()
    assert len(listed) == 2
    by_substitute = client.get("/api/reallocations", params={"faculty_id": campus["faculty_h"]}).json()
    assert len(by_substitute) == 2
    assert client.get("/api/reallocations", params={"reallocation_date": "2026-10-20"}).json() == []


def test_processing_rejects_busy_or_unknown_substitutes(client, slots, campus):
    schedule(client, slots, campus, section="section_a", faculty="faculty_f", room="room_101", slot=2)
    schedule(client, slots, campus, section="section_b", faculty="faculty_g", room="room_lab", slot=2)
    absence_id = mark_absent(client, campus["faculty_f"], reason="Medical").json()["id"]

    busy = client.post(f"/api/absences/{absence_id}/process", json={"substitute_faculty_id": campus["faculty_g"]})
    unknown = client.post(f"/api/absences/{absence_id}/process", json={"substitute_faculty_id": "nobody"})
    self_sub = client.post(f"/api/absences/{absence_id}/process", json={"substitute_faculty_id": campus["faculty_f"]})

    assert busy.status_code == 409
    assert busy.json()["details"]["available_substitute_ids"] == [campus["faculty_h"]]
    assert unknown.status_code == 404
    assert self_sub.status_code == 409
    assert client.get(f"/api/absences/{absence_id}").json()["is_processed"] is False

    ok = client.post(f"/api/absences/{absence_id}/process", json={"substitute_faculty_id": campus["faculty_h"]})
    assert ok.json()["reallocations"][0]["reason"] == "Medical"


def test_absence_listing_filters(client, campus):
    mark_absent(client, campus["faculty_f"], absence_date="2026-10-19")
    mark_absent(client, campus["faculty_f"], absence_date="2026-10-21")
    latest_g = mark_absent(client, campus["faculty_g"], absence_date="2026-10-20").json()
    client.post(f"/api/absences/{latest_g['id']}/process", json={"substitute_faculty_id": campus["faculty_h"]})

    everything = client.get("/api/absences").json()
    pending = client.get("/api/absences", params={"is_processed": False}).json()
    for_f = client.get("/api/absences", params={"faculty_id": campus["faculty_f"]}).json()

    assert [item["absence_date"] for item in everything] == ["2026-10-21", "2026-10-20", "2026-10-19"]
    assert len(pending) == 2
    assert {item["faculty_id"] for item in for_f} == {campus["faculty_f"]}
    assert client.get("/api/absences/missing").status_code == 404


def test_dashboard_summary_counts(client, slots, campus):
    schedule(client, slots, campus, section="section_a", faculty="faculty_f", room="room_101", slot=1)
    schedule(client, slots, campus, section="section_b", faculty="faculty_g", room="room_lab", slot=1)
    schedule(client, slots, campus, section="section_a", faculty="faculty_f", room="room_101", slot=1, day=MONDAY + 1)
    mark_absent(client, campus["faculty_f"])
    client.put(f"/api/classrooms/{campus['room_lab']}", json={"is_available": False})

    body = client.get("/api/dashboard/summary", params={"on": ABSENCE_DATE}).json()

    assert body == {
        "faculty_count": 3,
        "classroom_count": 2,
        "available_classroom_count": 1,
        "course_count": 2,
        "pending_absence_count": 1,
        "today_class_count": 2,
        "today": "Monday",
    }


def test_absence_processed_by_another_session_is_not_processed_twice(engine, db_session, client, slots, campus):
    schedule(client, slots, campus, section="section_a", faculty="faculty_f", room="room_101", slot=1)
    absence_id = mark_absent(client, campus["faculty_f"]).json()["id"]

    # This session has already loaded the absence as unprocessed.
    stale = get_absence(db_session, absence_id)
    assert stale.is_processed is False

    other = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        process_absence(other, absence_id, campus["faculty_h"], match_mode="start_time")
    finally:
        other.close()

    with pytest.raises(AbsenceError) as excinfo:
        process_absence(db_session, absence_id, campus["faculty_g"], match_mode="start_time")

    assert excinfo.value.status_code == 409
    log_count = db_session.execute(select(func.count()).select_from(ReallocationLog)).scalar_one()
    assert log_count == 1
    current = client.get(f"/api/absences/{absence_id}").json()
    assert current["substitute_faculty_id"] == campus["faculty_h"]
