SEMESTER = "Spring-2025"
BASE = f"/api/semesters/{SEMESTER}"


def add_section(client, section_id="15-CSE111-A", **overrides):
    payload = {
        "section_id": section_id,
        "semester": SEMESTER,
        "p_id": "15",
        "course_code": "CSE111",
        "course_title": "Computer Fundamentals",
        "section": "A",
        "credit": 3.0,
        "teacher_id": "T-1",
        "teacher_name": "Mr. Anis",
    }
    payload.update(overrides)
    response = client.post("/api/sections/", json=payload)
    assert response.status_code == 201, response.text


def entry_payload(**overrides):
    payload = {
        # 2025-01-04 is a Saturday.
        "date": "2025-01-04",
        "time_slot": "08:30 - 10:00",
        "room_number": "101",
        "building_name": "Academic Building 1",
        "course_code": "CSE111",
        "course_title": "Computer Fundamentals",
        "section": "A",
        "p_id": "15",
        "status": "Students present but teacher absent",
        "teacher_id": "T-1",
        "teacher_name": "Mr. Anis",
        "teacher_designation": "Lecturer",
    }
    payload.update(overrides)
    return payload


def log_entry(client, **overrides):
    response = client.post(f"{BASE}/attendance", json=entry_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


def test_makeup_class_is_written_as_override(client):
    add_section(client)

    entry = log_entry(
        client, makeup_info={"date": "2025-01-09", "time_slot": "10:00 - 11:30", "room_number": "102"}
    )
    assert entry["time_slot"] == "08:30 AM - 10:00 AM"
    assert entry["makeup_info"] == {"date": "2025-01-09", "time_slot": "10:00 AM - 11:30 AM", "room_number": "102"}
    assert entry["makeup_completed"] is False

    overrides = client.get(f"{BASE}/overrides").json()
    makeup = overrides["102"]["10:00 AM - 11:30 AM"]["2025-01-09"]
    assert (makeup["courseCode"], makeup["section"], makeup["pId"], makeup["teacher"]) == (
        "CSE111",
        "A",
        "15",
        "Mr. Anis",
    )

    history = client.get(f"{BASE}/history").json()
    assert [(item["room_number"], item["day"], item["is_override"]) for item in history] == [
        ("102", "Thursday", True)
    ]


def test_duplicate_class_entry_is_rejected(client):
    log_entry(client)

    duplicate = client.post(f"{BASE}/attendance", json=entry_payload(time_slot="08:30 AM - 10:00 AM"))
    assert duplicate.status_code == 409
    assert "message" in duplicate.json()

    other_course = client.post(f"{BASE}/attendance", json=entry_payload(course_code="CSE121"))
    assert other_course.status_code == 201


def test_moving_and_cancelling_makeup_keeps_overrides_in_sync(client):
    add_section(client)
    entry = log_entry(
        client, makeup_info={"date": "2025-01-09", "time_slot": "10:00 - 11:30", "room_number": "102"}
    )
    url = f"{BASE}/attendance/{entry['id']}"

    moved = client.put(
        url, json={"makeup_info": {"date": "2025-01-10", "time_slot": "08:30 - 10:00", "room_number": "103"}}
    )
    assert moved.status_code == 200
    assert moved.json()["makeup_info"]["room_number"] == "103"
    overrides = client.get(f"{BASE}/overrides").json()
    assert list(overrides) == ["103"]
    assert overrides["103"]["08:30 AM - 10:00 AM"]["2025-01-10"]["courseCode"] == "CSE111"

    completed = client.post(f"{url}/makeup-status")
    assert completed.json()["makeup_completed"] is True

    remark_only = client.put(url, json={"remark": "Teacher was ill"})
    assert remark_only.json()["remark"] == "Teacher was ill"
    assert list(client.get(f"{BASE}/overrides").json()) == ["103"]

    cancelled = client.put(url, json={"makeup_info": None})
    assert cancelled.json()["makeup_info"] is None
    assert cancelled.json()["makeup_completed"] is False
    assert client.get(f"{BASE}/overrides").json() == {}

    assert client.post(f"{url}/makeup-status").status_code == 409

    # One write for the first makeup, two for the move, one for the cancel.
    history = client.get(f"{BASE}/history").json()
    assert len(history) == 4


def test_deleting_entry_removes_its_makeup(client):
    add_section(client)
    entry = log_entry(
        client, makeup_info={"date": "2025-01-09", "time_slot": "10:00 - 11:30", "room_number": "102"}
    )

    assert client.delete(f"{BASE}/attendance/{entry['id']}").json() == {"success": True}
    assert client.get(f"{BASE}/overrides").json() == {}
    assert client.get(f"{BASE}/attendance").json()["totalItems"] == 0
    assert client.delete(f"{BASE}/attendance/{entry['id']}").status_code == 404


def test_clearing_log_removes_every_makeup(client):
    add_section(client)
    add_section(client, "15-CSE121-A", course_code="CSE121", course_title="Structured Programming")
    log_entry(client, makeup_info={"date": "2025-01-09", "time_slot": "10:00 - 11:30", "room_number": "102"})
    log_entry(
        client,
        course_code="CSE121",
        makeup_info={"date": "2025-01-09", "time_slot": "08:30 - 10:00", "room_number": "102"},
    )
    log_entry(client, date="2025-01-11")

    response = client.delete(f"{BASE}/attendance")
    assert response.json() == {"deleted": 3, "overrides_removed": 2}
    assert client.get(f"{BASE}/overrides").json() == {}


def test_makeup_for_unknown_section_is_not_found(client):
    response = client.post(
        f"{BASE}/attendance",
        json=entry_payload(makeup_info={"date": "2025-01-09", "time_slot": "10:00 - 11:30", "room_number": "102"}),
    )
    assert response.status_code == 404
    assert client.get(f"{BASE}/attendance").json()["totalItems"] == 0
    assert client.get(f"{BASE}/overrides").json() == {}


def test_makeup_prefers_section_of_logged_program(client):
    add_section(client, "15-CSE121-A1", course_code="CSE121", section="A1")
    add_section(client, "19-CSE121-A1", p_id="19", course_code="CSE121", section="A1", teacher_name="Dr. Hasan")

    log_entry(
        client,
        course_code="CSE121",
        section="A1",
        p_id="19",
        makeup_info={"date": "2025-01-09", "time_slot": "10:00 - 11:30", "room_number": "102"},
    )
    makeup = client.get(f"{BASE}/overrides").json()["102"]["10:00 AM - 11:30 AM"]["2025-01-09"]
    assert (makeup["pId"], makeup["teacher"]) == ("19", "Dr. Hasan")


def test_list_filters_and_pages(client):
    add_section(client)
    log_entry(client, date="2025-01-04", status="Class is going")
    log_entry(
        client,
        date="2025-01-11",
        makeup_info={"date": "2025-01-16", "time_slot": "10:00 - 11:30", "room_number": "102"},
    )
    log_entry(client, date="2025-01-18", status="Student and Teacher both are absent", remark="Hartal")

    listed = client.get(f"{BASE}/attendance").json()
    assert [item["date"] for item in listed["items"]] == ["2025-01-18", "2025-01-11", "2025-01-04"]

    going = client.get(f"{BASE}/attendance", params={"status": ["Class is going"]}).json()
    assert [item["date"] for item in going["items"]] == ["2025-01-04"]

    ranged = client.get(f"{BASE}/attendance", params={"scheduled_from": "2025-01-05", "scheduled_to": "2025-01-11"})
    assert [item["date"] for item in ranged.json()["items"]] == ["2025-01-11"]

    with_makeup = client.get(f"{BASE}/attendance", params={"makeup_status": "No", "makeup_from": "2025-01-16"}).json()
    assert [item["date"] for item in with_makeup["items"]] == ["2025-01-11"]
    assert client.get(f"{BASE}/attendance", params={"makeup_status": "Yes"}).json()["totalItems"] == 0

    searched = client.get(f"{BASE}/attendance", params={"search": "hartal"}).json()
    assert [item["date"] for item in searched["items"]] == ["2025-01-18"]

    paged = client.get(f"{BASE}/attendance", params={"page_size": 2, "page": 2}).json()
    assert (paged["totalItems"], paged["totalPages"], len(paged["items"])) == (3, 2, 1)

    assert client.get(f"{BASE}/attendance", params={"scheduled_from": "18/01/2025"}).status_code == 422
    assert client.get(f"{BASE}/attendance", params={"status": ["Cancelled"]}).status_code == 422


def test_entries_are_scoped_to_their_semester(client):
    entry = log_entry(client)

    assert client.get("/api/semesters/Fall-2025/attendance").json()["totalItems"] == 0
    assert client.put(f"/api/semesters/Fall-2025/attendance/{entry['id']}", json={"remark": "x"}).status_code == 404

    bad_date = client.post(f"{BASE}/attendance", json=entry_payload(date="04-01-2025"))
    assert bad_date.status_code == 422
