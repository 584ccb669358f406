"""Seed a small demo semester: default slots, programs, rooms, sections and a routine.

Run:
  PYTHONPATH=backend python scripts/seed_demo_data.py
"""

from __future__ import annotations

import logging
import os

from sqlalchemy import select

from routinedesk.core.logging import configure_logging
from routinedesk.db.bootstrap import ensure_schema
from routinedesk.db.session import SessionLocal, engine
from routinedesk.models.program import Program, ProgramType, SemesterSystem
from routinedesk.models.room import Room, RoomType
from routinedesk.models.routine import RoutineVersion
from routinedesk.models.section import CourseSection, CourseType
from routinedesk.models.semester import SemesterConfiguration
from routinedesk.models.time_slot import DefaultTimeSlot, SlotType

logger = logging.getLogger("seed_demo_data")

SEMESTER = os.getenv("DEMO_SEMESTER", "Spring 2025")
WEEKDAYS = ["Saturday", "Sunday", "Monday", "Tuesday", "Wednesday"]

DEFAULT_SLOTS = [
    (SlotType.theory, "08:30", "10:00"),
    (SlotType.theory, "10:00", "11:30"),
    (SlotType.theory, "11:30", "13:00"),
    (SlotType.theory, "14:30", "16:00"),
    (SlotType.lab, "13:00", "14:30"),
    (SlotType.lab, "16:00", "17:30"),
]

PROGRAMS = [
    {"p_id": "15", "short_name": "B.Sc. in CSE", "full_name": "Bachelor of Science in Computer Science and Engineering"},
    {"p_id": "19", "short_name": "B.Sc. in EEE", "full_name": "Bachelor of Science in Electrical and Electronic Engineering"},
]

ROOMS = [
    {"room_number": "AB1-101", "type": "Theory", "assigned_to_pid": "15", "shared_with_pids": ["19"]},
    {"room_number": "AB1-102", "type": "Theory", "assigned_to_pid": "19", "shared_with_pids": []},
    {"room_number": "CSE-LAB1", "type": "Lab", "assigned_to_pid": "15", "shared_with_pids": []},
]

SECTIONS = [
    ("15-CSE111-SA", "15", "CSE111", "Computer Fundamentals", "SA", 3.0, CourseType.theory, 2, 40, "T-101", "Mr. Anis"),
    ("15-CSE111L-SL1", "15", "CSE111L", "Computer Fundamentals Lab", "SL1", 1.0, CourseType.lab, 1, 20, "T-101", "Mr. Anis"),
    ("15-CSE121-A1", "15", "CSE121", "Structured Programming", "A1", 3.0, CourseType.theory, 2, 35, "T-102", "Dr. Hasan"),
    ("19-CSE121-A1", "19", "CSE121", "Structured Programming", "A1", 3.0, CourseType.theory, 2, 15, "T-102", "Dr. Hasan"),
    ("19-EEE101-M3", "19", "EEE101", "Basic Electrical Engg.", "M3", 3.0, CourseType.theory, 2, 45, "T-103", "Mr. Papon"),
]

ROUTINE = {
    "Saturday": {
        "AB1-101": {
            "08:30 AM - 10:00 AM": {"courseCode": "CSE111", "courseName": "Computer Fundamentals", "teacher": "Mr. Anis", "section": "SA", "pId": "15", "levelTerm": "L1T1"},
            "10:00 AM - 11:30 AM": {"courseCode": "CSE121", "courseName": "Structured Programming", "teacher": "Dr. Hasan", "section": "A1", "pId": "15", "levelTerm": "L1T2"},
        },
        "CSE-LAB1": {
            "01:00 PM - 02:30 PM": {"courseCode": "CSE111L", "courseName": "Computer Fundamentals Lab", "teacher": "Mr. Anis", "section": "SL1", "pId": "15", "levelTerm": "L1T1"},
        },
    },
    "Monday": {
        "AB1-101": {
            "08:30 AM - 10:00 AM": {"courseCode": "CSE111", "courseName": "Computer Fundamentals", "teacher": "Mr. Anis", "section": "SA", "pId": "15", "levelTerm": "L1T1"},
        },
        "AB1-102": {
            "08:30 AM - 10:00 AM": {"courseCode": "EEE101", "courseName": "Basic Electrical Engg.", "teacher": "Mr. Papon", "section": "M3", "pId": "19", "levelTerm": "L1T3"},
        },
    },
}


def _seed_default_slots(session) -> None:
    existing = {(row.type, row.start_time, row.end_time) for row in session.execute(select(DefaultTimeSlot)).scalars()}
    for slot_type, start, end in DEFAULT_SLOTS:
        if (slot_type, start, end) not in existing:
            session.add(DefaultTimeSlot(type=slot_type, start_time=start, end_time=end))


def _seed_programs(session) -> None:
    for item in PROGRAMS:
        program = session.execute(select(Program).where(Program.p_id == item["p_id"])).scalar_one_or_none()
        if program is None:
            program = Program(p_id=item["p_id"], program_specific_slots=[])
            session.add(program)
        program.short_name = item["short_name"]
        program.full_name = item["full_name"]
        program.faculty = "Faculty of Science and Information Technology"
        program.type = ProgramType.undergraduate
        program.semester_system = SemesterSystem.tri_semester
        program.active_days = WEEKDAYS


def _room_type_id(session, type_name: str) -> str:
    room_type = session.execute(select(RoomType).where(RoomType.type_name == type_name)).scalar_one_or_none()
    if room_type is None:
        room_type = RoomType(type_name=type_name)
        session.add(room_type)
        session.flush()
    return room_type.id


def _seed_rooms(session) -> None:
    for item in ROOMS:
        room = session.execute(
            select(Room).where(Room.semester_id == SEMESTER, Room.room_number == item["room_number"])
        ).scalar_one_or_none()
        if room is None:
            room = Room(room_number=item["room_number"], semester_id=SEMESTER, room_specific_slots=[])
            session.add(room)
        room.building_id = "AB1" if item["room_number"].startswith("AB1") else "CSE"
        room.floor_id = "1"
        room.category_id = "classroom"
        room.type_id = _room_type_id(session, item["type"])
        room.capacity = 40
        room.assigned_to_pid = item["assigned_to_pid"]
        room.shared_with_pids = item["shared_with_pids"]


def _seed_sections(session) -> None:
    for section_id, p_id, code, title, label, credit, course_type, weekly, students, teacher_id, teacher in SECTIONS:
        section = session.execute(
            select(CourseSection).where(CourseSection.section_id == section_id)
        ).scalar_one_or_none()
        if section is None:
            section = CourseSection(section_id=section_id)
            session.add(section)
        section.semester = SEMESTER
        section.p_id = p_id
        section.course_code = code
        section.course_title = title
        section.section = label
        section.credit = credit
        section.type = "Core"
        section.level_term = "L1T1"
        section.course_type = course_type
        section.weekly_class = weekly
        section.student_count = students
        section.teacher_id = teacher_id
        section.teacher_name = teacher
        section.designation = "Lecturer"
    # The EEE cohort of CSE121 is taught together with the CSE cohort.
    session.flush()
    merged = session.execute(
        select(CourseSection).where(CourseSection.section_id == "19-CSE121-A1")
    ).scalar_one()
    merged.merged_with_section_id = "15-CSE121-A1"


def _seed_semester(session) -> None:
    config = session.execute(
        select(SemesterConfiguration).where(SemesterConfiguration.target_semester == SEMESTER)
    ).scalar_one_or_none()
    if config is None:
        config = SemesterConfiguration(target_semester=SEMESTER)
        session.add(config)
    config.source_semester = ""
    config.type_configs = [
        {"id": 1, "type": SemesterSystem.tri_semester.value, "startDate": "2025-01-04", "endDate": "2025-04-24"},
        {"id": 2, "type": SemesterSystem.bi_semester.value, "startDate": "2025-01-04", "endDate": "2025-06-12"},
    ]

    version = session.execute(
        select(RoutineVersion).where(RoutineVersion.semester_id == SEMESTER, RoutineVersion.is_active.is_(True))
    ).scalars().first()
    if version is None:
        session.add(RoutineVersion(semester_id=SEMESTER, label="Initial", routine=ROUTINE, is_active=True))


def main() -> None:
    configure_logging("INFO")
    ensure_schema(engine)
    with SessionLocal() as session:
        _seed_default_slots(session)
        _seed_programs(session)
        _seed_rooms(session)
        _seed_sections(session)
        _seed_semester(session)
        session.commit()
    logger.info("Seeded demo data for %s", SEMESTER)


if __name__ == "__main__":
    main()
