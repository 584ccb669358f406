import pytest

from routinedesk.models.program import Program, SemesterSystem
from routinedesk.models.room import Room, RoomType
from routinedesk.models.routine import RoutineVersion
from routinedesk.models.section import CourseSection, CourseType
from routinedesk.models.semester import SemesterConfiguration
from routinedesk.models.time_slot import DefaultTimeSlot, SlotType

SEMESTER = "Spring 2025"
MORNING = "08:30 AM - 10:00 AM"
LATE_MORNING = "10:00 AM - 11:30 AM"
LAB = "01:00 PM - 02:30 PM"


def cell(course_code, section, p_id):
    return {"courseCode": course_code, "section": section, "pId": p_id}


def add_section(session, section_id, p_id, course_code, label, credit, course_type, weekly, students, teacher, **extra):
    teacher_id, teacher_name, designation = teacher
    session.add(
        CourseSection(
            section_id=section_id,
            semester=SEMESTER,
            p_id=p_id,
            course_code=course_code,
            course_title=f"Course {course_code}",
            section=label,
            credit=credit,
            type="Core",
            level_term="L1T1",
            course_type=course_type,
            weekly_class=weekly,
            student_count=students,
            teacher_id=teacher_id,
            teacher_name=teacher_name,
            designation=designation,
            **extra,
        )
    )


@pytest.fixture()
def seeded(session_factory):
    anis = ("T1", "Mr. Anis", "Lecturer")
    hasan = ("T2", "Dr. Hasan", "Professor")

    with session_factory() as session:
        session.add_all(
            [
                DefaultTimeSlot(type=SlotType.theory, start_time="08:30", end_time="10:00"),
                DefaultTimeSlot(type=SlotType.theory, start_time="10:00", end_time="11:30"),
                DefaultTimeSlot(type=SlotType.lab, start_time="13:00", end_time="14:30"),
                RoomType(id="type-theory", type_name="Theory"),
                RoomType(id="type-lab", type_name="Lab"),
                Program(
                    p_id="15",
                    short_name="CSE",
                    full_name="Computer Science and Engineering",
                    semester_system=SemesterSystem.tri_semester,
                    active_days=["Saturday", "Monday"],
                    program_specific_slots=[],
                ),
                Program(
                    p_id="19",
                    short_name="EEE",
                    full_name="Electrical and Electronic Engineering",
                    semester_system=SemesterSystem.tri_semester,
                    active_days=["Sunday"],
                    program_specific_slots=[],
                ),
                SemesterConfiguration(
                    target_semester=SEMESTER,
                    type_configs=[
                        {"id": 1, "type": "Tri-Semester", "startDate": "2025-01-04", "endDate": "2025-01-31"}
                    ],
                ),
            ]
        )
        rooms = {}
        for number, type_id, assigned, shared in [
            ("AB1-101", "type-theory", "15", ["19"]),
            ("AB1-102", "type-theory", "19", []),
            ("CSE-LAB1", "type-lab", "15", []),
        ]:
            room = Room(
                room_number=number,
                building_id="AB1",
                floor_id="1",
                category_id="classroom",
                type_id=type_id,
                semester_id=SEMESTER,
                assigned_to_pid=assigned,
                shared_with_pids=shared,
                room_specific_slots=[],
            )
            session.add(room)
            rooms[number] = room

        add_section(session, "15-CSE111-A", "15", "CSE111", "A", 3.0, CourseType.theory, 2, 40, anis, class_taken=3)
        add_section(session, "15-CSE111L-L1", "15", "CSE111L", "L1", 1.0, CourseType.lab, 1, 20, anis)
        add_section(session, "15-CSE121-A1", "15", "CSE121", "A1", 3.0, CourseType.theory, 2, 35, hasan)
        add_section(
            session,
            "19-CSE121-A1",
            "19",
            "CSE121",
            "A1",
            3.0,
            CourseType.theory,
            2,
            15,
            hasan,
            merged_with_section_id="15-CSE121-A1",
        )
        session.add(
            RoutineVersion(
                semester_id=SEMESTER,
                label="Initial",
                is_active=True,
                routine={
                    "Saturday": {
                        "AB1-101": {MORNING: cell("CSE111", "A", "15"), LATE_MORNING: cell("CSE121", "A1", "15")},
                        "CSE-LAB1": {LAB: cell("CSE111L", "L1", "15")},
                    },
                    "Sunday": {"AB1-102": {MORNING: cell("CSE121", "A1", "19")}},
                    "Monday": {"AB1-101": {MORNING: cell("CSE111", "A", "15")}},
                },
            )
        )
        session.commit()
        return {number: room.id for number, room in rooms.items()}


def test_occupancy_requires_semester(client, seeded):
    assert client.get("/api/dashboard/occupancy").status_code == 422


def test_semester_wide_occupancy(client, seeded):
    report = client.get("/api/dashboard/occupancy", params={"semester_id": SEMESTER}).json()

    assert report["days"] == ["Saturday", "Sunday", "Monday"]
    assert [(slot["type"], slot["startTime"]) for slot in report["headerSlots"]] == [
        ("Theory", "08:30"),
        ("Theory", "10:00"),
        ("Lab", "13:00"),
    ]
    assert report["perDay"]["Saturday"] == {"booked": 3, "total": 6, "percentage": 50.0}
    assert report["perDay"]["Sunday"] == {"booked": 1, "total": 3, "percentage": 33.3}
    assert report["perColumn"][MORNING]["booked"] == 3
    assert report["grandTotal"] == {"booked": 5, "total": 15, "percentage": 33.3}


def test_single_program_occupancy(client, seeded):
    report = client.get("/api/dashboard/occupancy", params={"semester_id": SEMESTER, "pid": "19"}).json()

    assert report["days"] == ["Sunday"]
    assert report["perSlot"]["Sunday"][MORNING] == {"booked": 1, "total": 1, "percentage": 100.0}
    assert report["grandTotal"]["total"] == 3


def test_theory_tab_limits_rooms_and_slots(client, seeded):
    report = client.get("/api/dashboard/occupancy", params={"semester_id": SEMESTER, "tab": "Theory"}).json()

    assert [slot["startTime"] for slot in report["headerSlots"]] == ["08:30", "10:00"]
    assert report["grandTotal"]["booked"] == 4
    assert report["grandTotal"]["total"] == 6


def test_occupancy_on_date_applies_overrides(client, seeded):
    client.put(
        f"/api/semesters/{SEMESTER}/overrides",
        json={"room_number": "AB1-101", "slot_string": MORNING, "date": "2025-01-06", "class_detail": None},
    )

    params = {"semester_id": SEMESTER, "date": "2025-01-06"}
    report = client.get("/api/dashboard/occupancy", params=params).json()
    assert report["perDay"]["Monday"]["booked"] == 0
    assert report["perDay"]["Saturday"]["booked"] == 3

    bad_date = client.get("/api/dashboard/occupancy", params={"semester_id": SEMESTER, "date": "06-01-2025"})
    assert bad_date.status_code == 422


def test_summary(client, seeded):
    summary = client.get("/api/dashboard/summary", params={"semester_id": SEMESTER}).json()
    assert summary == {
        "teacherCount": 2,
        "uniqueCourseCount": 3,
        "sectionCount": 4,
        "slotRequirement": 7,
        "bookedSlotRequirement": 5,
        "roomCount": 3,
        "totalSlots": 15,
        "bookedSlots": 5,
    }

    lab = client.get("/api/dashboard/summary", params={"semester_id": SEMESTER, "tab": "Lab"}).json()
    assert (lab["sectionCount"], lab["roomCount"], lab["totalSlots"], lab["bookedSlots"]) == (1, 1, 2, 1)


def test_section_stats(client, seeded):
    stats = client.get("/api/dashboard/section-stats", params={"semester_id": SEMESTER}).json()
    by_id = {item["sectionId"]: item for item in stats}
    # January 4-31, 2025 holds four Saturdays, four Sundays and four Mondays.
    assert by_id["15-CSE111-A"] == {"sectionId": "15-CSE111-A", "ciw": 2, "cr": 8, "cat": 3}
    assert by_id["15-CSE111L-L1"]["cr"] == 4
    assert by_id["19-CSE121-A1"]["ciw"] == 1


def test_teacher_list_filters_and_pages(client, seeded):
    base = {"semester_id": SEMESTER}

    page = client.get("/api/dashboard/teachers", params=base).json()
    assert [(item["teacherName"], item["creditLoad"]) for item in page["items"]] == [
        ("Dr. Hasan", 6.0),
        ("Mr. Anis", 4.0),
    ]

    professors = client.get("/api/dashboard/teachers", params={**base, "designation": ["Professor"]}).json()
    assert [item["employeeId"] for item in professors["items"]] == ["T2"]

    either = client.get(
        "/api/dashboard/teachers", params={**base, "designation": ["Professor", "Lecturer"], "min_credit": "5"}
    ).json()
    assert [item["employeeId"] for item in either["items"]] == ["T2"]

    searched = client.get("/api/dashboard/teachers", params={**base, "search": "cse111l"}).json()
    assert [item["employeeId"] for item in searched["items"]] == ["T1"]

    paged = client.get("/api/dashboard/teachers", params={**base, "page_size": 1, "page": 2}).json()
    assert (paged["totalItems"], paged["totalPages"], paged["items"][0]["employeeId"]) == (2, 2, "T1")

    bad = client.get("/api/dashboard/teachers", params={**base, "min_credit": "lots"})
    assert bad.status_code == 422

    not_a_number = client.get("/api/dashboard/teachers", params={**base, "max_credit": "nan"})
    assert not_a_number.status_code == 422


def test_teacher_course_sheet_nests_merged_sections(client, seeded):
    sheet = client.get("/api/dashboard/teachers/T2/courses", params={"semester_id": SEMESTER}).json()

    assert [course["section_id"] for course in sheet["courses"]] == ["15-CSE121-A1"]
    root = sheet["courses"][0]
    assert [child["section_id"] for child in root["children"]] == ["19-CSE121-A1"]
    assert root["stats"] == {"students": 50, "ciw": 2, "cr": 8, "cat": 0}
    assert sheet["totals"]["credits"] == 3.0
    assert sheet["totals"]["students"] == 50
    assert sheet["integrityErrors"] == []


def test_course_list(client, seeded):
    base = {"semester_id": SEMESTER}

    courses = client.get("/api/dashboard/courses", params=base).json()
    assert [(item["pId"], item["courseCode"]) for item in courses["items"]] == [
        ("15", "CSE111"),
        ("15", "CSE111L"),
        ("15", "CSE121"),
        ("19", "CSE121"),
    ]

    heavy = client.get("/api/dashboard/courses", params={**base, "min_cr": "5"}).json()
    assert [item["courseCode"] for item in heavy["items"]] == ["CSE111"]

    labs = client.get("/api/dashboard/courses", params={**base, "course_type": ["Lab (Core)"]}).json()
    assert [item["courseCode"] for item in labs["items"]] == ["CSE111L"]

    searched = client.get("/api/dashboard/courses", params={**base, "search": "cse121", "pid": "19"}).json()
    assert [(item["pId"], item["totalStudents"]) for item in searched["items"]] == [("19", 15)]


def test_section_list(client, seeded):
    base = {"semester_id": SEMESTER}

    labs = client.get("/api/dashboard/sections", params={**base, "tab": "Lab"}).json()
    assert [(row["section_id"], row["ciw"], row["cr"]) for row in labs["items"]] == [("15-CSE111L-L1", 1, 4)]

    by_teacher = client.get("/api/dashboard/sections", params={**base, "search": "hasan"}).json()
    assert by_teacher["totalItems"] == 2

    large = client.get("/api/dashboard/sections", params={**base, "min_students": "30"}).json()
    assert [row["section_id"] for row in large["items"]] == ["15-CSE111-A", "15-CSE121-A1"]


def test_room_occupancy(client, seeded):
    stats = client.get(f"/api/dashboard/rooms/{seeded['AB1-101']}/occupancy").json()
    assert stats["roomNumber"] == "AB1-101"
    assert stats["theory"] == {"booked": 3, "total": 4, "percentage": 75.0}
    assert stats["lab"] == {"booked": 0, "total": 2, "percentage": 0.0}

    assert client.get("/api/dashboard/rooms/missing/occupancy").status_code == 404


def test_summary_counts_only_classes_of_programs_in_scope(client, seeded):
    # AB1-101 belongs to program 15 and is shared with 19; book it for a 19 class.
    response = client.put(
        f"/api/semesters/{SEMESTER}/routine/cells",
        json={
            "day": "Monday",
            "room_number": "AB1-101",
            "slot_string": LATE_MORNING,
            "class_detail": cell("CSE121", "A1", "19"),
        },
    )
    assert response.status_code == 200

    params = {"semester_id": SEMESTER, "pid": "15"}
    summary = client.get("/api/dashboard/summary", params=params).json()
    report = client.get("/api/dashboard/occupancy", params=params).json()

    assert (summary["bookedSlots"], summary["totalSlots"]) == (4, 12)
    assert (report["grandTotal"]["booked"], report["grandTotal"]["total"]) == (4, 12)

    everything = client.get("/api/dashboard/summary", params={"semester_id": SEMESTER}).json()
    assert everything["bookedSlots"] == 6
