"""Class requirement (CR) and classes-in-week (CIW) counts per section.

Routine cells carry a denormalized copy of the course; a cell belongs to a
section when semester, program, course code and section label all match.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import date

from routinedesk.schemas.program import ProgramEntry
from routinedesk.schemas.routine import ClassDetail, FullRoutine
from routinedesk.schemas.section import EnrollmentEntry
from routinedesk.schemas.semester import SemesterConfig
from routinedesk.services.time_slots import order_days

logger = logging.getLogger(__name__)

# date.weekday() numbering
WEEKDAY_INDEX = {
    "Monday": 0,
    "Tuesday": 1,
    "Wednesday": 2,
    "Thursday": 3,
    "Friday": 4,
    "Saturday": 5,
    "Sunday": 6,
}


def _parse_date(value: str) -> date | None:
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        logger.warning("Ignoring unparseable semester date %r", value)
        return None


def count_day_occurrences(day_of_week: str, start_date: str, end_date: str) -> int:
    """Number of ``day_of_week`` dates in ``[start_date, end_date]``, inclusive.

    Empty or malformed dates and unknown day names give 0.
    """
    if not start_date or not end_date:
        return 0
    target = WEEKDAY_INDEX.get(day_of_week)
    if target is None:
        return 0
    start = _parse_date(start_date)
    end = _parse_date(end_date)
    if start is None or end is None or end < start:
        return 0
    offset = (target - start.weekday()) % 7
    span = (end - start).days - offset
    if span < 0:
        return 0
    return span // 7 + 1


def matches_section(detail: ClassDetail, section: EnrollmentEntry) -> bool:
    return (
        detail.p_id == section.p_id
        and detail.course_code == section.course_code
        and detail.section == section.section
    )


def scheduled_days(section: EnrollmentEntry, routine: FullRoutine) -> list[str]:
    """Week days on which the section meets anywhere in the routine."""
    days = {
        day
        for day, rooms in routine.items()
        for slots in rooms.values()
        for detail in slots.values()
        if detail is not None and matches_section(detail, section)
    }
    return order_days(days)


def semester_date_range(program: ProgramEntry | None, semester_config: SemesterConfig | None) -> tuple[str, str]:
    if program is None or semester_config is None:
        return "", ""
    for type_config in semester_config.type_configs:
        if type_config.type == program.semester_system:
            return type_config.start_date, type_config.end_date
    return "", ""


def compute_class_requirement(
    section: EnrollmentEntry,
    routine: FullRoutine,
    program: ProgramEntry | None,
    semester_config: SemesterConfig | None,
) -> int:
    days = scheduled_days(section, routine)
    if not days:
        return 0
    start_date, end_date = semester_date_range(program, semester_config)
    if not start_date or not end_date:
        return 0
    return sum(count_day_occurrences(day, start_date, end_date) for day in days)


def class_requirement_counts(
    sections: Iterable[EnrollmentEntry],
    routines_by_semester: Mapping[str, FullRoutine],
    programs: Sequence[ProgramEntry],
    semester_configs: Sequence[SemesterConfig],
) -> dict[str, int]:
    programs_by_pid = {program.p_id: program for program in programs}
    configs_by_semester: dict[str, SemesterConfig] = {}
    for config in semester_configs:
        configs_by_semester.setdefault(config.target_semester, config)

    return {
        section.section_id: compute_class_requirement(
            section,
            routines_by_semester.get(section.semester, {}),
            programs_by_pid.get(section.p_id),
            configs_by_semester.get(section.semester),
        )
        for section in sections
    }


def classes_in_week_counts(
    sections: Sequence[EnrollmentEntry],
    routines_by_semester: Mapping[str, FullRoutine],
) -> dict[str, int]:
    """Routine cells per section; each cell counts for the first matching section."""
    counts = {section.section_id: 0 for section in sections}
    index: dict[tuple[str, str | None, str, str], str] = {}
    for section in sections:
        index.setdefault((section.semester, section.p_id, section.course_code, section.section), section.section_id)

    for semester_id, routine in routines_by_semester.items():
        for rooms in routine.values():
            for slots in rooms.values():
                for detail in slots.values():
                    if detail is None:
                        continue
                    section_id = index.get((semester_id, detail.p_id, detail.course_code, detail.section))
                    if section_id is not None:
                        counts[section_id] += 1
    return counts
