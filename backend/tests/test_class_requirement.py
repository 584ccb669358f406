import logging

import pytest

from routinedesk.schemas.program import ProgramEntry
from routinedesk.schemas.routine import parse_routine
from routinedesk.schemas.section import EnrollmentEntry
from routinedesk.schemas.semester import SemesterConfig
from routinedesk.services.class_requirement import (
    class_requirement_counts,
    classes_in_week_counts,
    compute_class_requirement,
    count_day_occurrences,
    scheduled_days,
)

SEMESTER = "Spring 2024"


def section(section_id: str, course_code: str = "CSE111", label: str = "A", p_id: str = "15") -> EnrollmentEntry:
    return EnrollmentEntry(
        section_id=section_id,
        semester=SEMESTER,
        p_id=p_id,
        course_code=course_code,
        section=label,
    )


def cell(course_code: str = "CSE111", label: str = "A", p_id: str = "15") -> dict:
    return {"courseCode": course_code, "section": label, "pId": p_id}


PROGRAM = ProgramEntry(
    p_id="15",
    short_name="CSE",
    full_name="Computer Science",
    semester_system="Tri-Semester",
    active_days=["Saturday", "Sunday", "Monday"],
)

CONFIG = SemesterConfig(
    target_semester=SEMESTER,
    type_configs=[
        {"type": "Tri-Semester", "startDate": "2024-01-01", "endDate": "2024-01-31"},
        {"type": "Bi-Semester", "startDate": "2024-01-01", "endDate": "2024-06-30"},
    ],
)


@pytest.mark.parametrize(
    ("day", "start", "end", "expected"),
    [
        ("Monday", "2024-01-01", "2024-01-31", 5),
        ("Sunday", "2024-01-01", "2024-01-01", 0),
        ("Monday", "2024-01-01", "2024-01-01", 1),
        ("Saturday", "2024-01-01", "2024-01-31", 4),
        ("Wednesday", "2024-01-01", "2024-01-31", 5),
        ("Monday", "2024-02-01", "2024-01-01", 0),
    ],
)
def test_count_day_occurrences(day, start, end, expected):
    assert count_day_occurrences(day, start, end) == expected


def test_count_day_occurrences_spans_dst_changes():
    # US and EU clocks change in March; whole-date arithmetic is unaffected.
    assert count_day_occurrences("Sunday", "2024-03-01", "2024-03-31") == 5


@pytest.mark.parametrize("day", ["Saturday", "Sunday", "Monday", "Friday"])
def test_empty_start_date_gives_zero(day):
    assert count_day_occurrences(day, "", "2024-01-31") == 0
    assert count_day_occurrences(day, "2024-01-01", "") == 0


def test_malformed_date_gives_zero_and_logs(caplog):
    with caplog.at_level(logging.WARNING, logger="routinedesk.services.class_requirement"):
        assert count_day_occurrences("Monday", "2024-13-45", "2024-01-31") == 0
    assert "unparseable" in caplog.text


def test_unknown_day_gives_zero():
    assert count_day_occurrences("Funday", "2024-01-01", "2024-01-31") == 0


def test_scheduled_days_matches_course_section_and_program():
    routine = parse_routine(
        {
            "Monday": {"101": {"08:30 - 10:00": cell()}},
            "Saturday": {"205": {"10:00 - 11:30": cell()}},
            "Sunday": {"101": {"08:30 - 10:00": cell(p_id="19")}},
            "Tuesday": {"101": {"08:30 - 10:00": cell(label="B")}},
        }
    )
    assert scheduled_days(section("s1"), routine) == ["Saturday", "Monday"]


def test_class_requirement_sums_occurrences_of_scheduled_days():
    routine = parse_routine(
        {
            "Monday": {"101": {"08:30 - 10:00": cell()}},
            "Wednesday": {"101": {"08:30 - 10:00": cell()}},
        }
    )
    # January 2024: five Mondays and five Wednesdays.
    assert compute_class_requirement(section("s1"), routine, PROGRAM, CONFIG) == 10


def test_class_requirement_is_zero_without_schedule_or_dates():
    routine = parse_routine({"Monday": {"101": {"08:30 - 10:00": cell()}}})
    assert compute_class_requirement(section("s1"), {}, PROGRAM, CONFIG) == 0
    assert compute_class_requirement(section("s1"), routine, None, CONFIG) == 0
    assert compute_class_requirement(section("s1"), routine, PROGRAM, None) == 0

    without_tri = SemesterConfig(
        target_semester=SEMESTER,
        type_configs=[{"type": "Bi-Semester", "startDate": "2024-01-01", "endDate": "2024-06-30"}],
    )
    assert compute_class_requirement(section("s1"), routine, PROGRAM, without_tri) == 0


def test_class_requirement_counts_cover_every_section():
    sections = [section("s1"), section("s2", label="B")]
    routines = {SEMESTER: parse_routine({"Monday": {"101": {"08:30 - 10:00": cell()}}})}
    counts = class_requirement_counts(sections, routines, [PROGRAM], [CONFIG])
    assert counts == {"s1": 5, "s2": 0}


def test_classes_in_week_counts_each_cell_once():
    sections = [section("s1"), section("s2", label="B"), section("dup")]
    routines = {
        SEMESTER: parse_routine(
            {
                "Monday": {"101": {"08:30 - 10:00": cell(), "10:00 - 11:30": cell(label="B")}},
                "Tuesday": {"102": {"08:30 - 10:00": cell()}},
            }
        ),
        "Fall 2023": parse_routine({"Monday": {"101": {"08:30 - 10:00": cell()}}}),
    }
    counts = classes_in_week_counts(sections, routines)
    # "dup" shares s1's key; the first matching section takes the cell.
    assert counts == {"s1": 2, "s2": 1, "dup": 0}
