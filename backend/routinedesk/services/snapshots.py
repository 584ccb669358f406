from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property

from sqlalchemy import select
from sqlalchemy.orm import Session

from routinedesk.models.program import Program
from routinedesk.models.room import Room, RoomType
from routinedesk.models.routine import RoutineVersion, ScheduleOverride
from routinedesk.models.section import CourseSection
from routinedesk.models.semester import SemesterConfiguration
from routinedesk.models.time_slot import DefaultTimeSlot
from routinedesk.schemas.program import ProgramEntry
from routinedesk.schemas.room import RoomEntry
from routinedesk.schemas.routine import ClassDetail, FullRoutine, ScheduleOverrides, parse_routine
from routinedesk.schemas.section import EnrollmentEntry
from routinedesk.schemas.semester import SemesterConfig
from routinedesk.schemas.time_slot import TimeSlot
from routinedesk.services.class_requirement import class_requirement_counts, classes_in_week_counts
from routinedesk.services.time_slots import sort_slots


@dataclass
class SemesterSnapshot:
    """Read-only copy of everything the dashboard computations need."""

    programs: list[ProgramEntry] = field(default_factory=list)
    rooms: list[RoomEntry] = field(default_factory=list)
    sections: list[EnrollmentEntry] = field(default_factory=list)
    semester_configs: list[SemesterConfig] = field(default_factory=list)
    default_slots: list[TimeSlot] = field(default_factory=list)
    routines: dict[str, FullRoutine] = field(default_factory=dict)
    room_type_names: dict[str, str] = field(default_factory=dict)

    @cached_property
    def ciw_counts(self) -> dict[str, int]:
        return classes_in_week_counts(self.sections, self.routines)

    @cached_property
    def cr_counts(self) -> dict[str, int]:
        return class_requirement_counts(self.sections, self.routines, self.programs, self.semester_configs)

    @property
    def configured_semesters(self) -> list[str]:
        return [config.target_semester for config in self.semester_configs]

    def routine_for(self, semester_id: str | None) -> FullRoutine:
        return self.routines.get(semester_id or "", {})


def load_default_slots(db: Session) -> list[TimeSlot]:
    rows = db.execute(select(DefaultTimeSlot)).scalars()
    return sort_slots(TimeSlot.model_validate(row) for row in rows)


def load_programs(db: Session) -> list[ProgramEntry]:
    return [ProgramEntry.model_validate(row) for row in db.execute(select(Program).order_by(Program.p_id)).scalars()]


def get_active_version(db: Session, semester_id: str) -> RoutineVersion | None:
    return db.execute(
        select(RoutineVersion)
        .where(RoutineVersion.semester_id == semester_id, RoutineVersion.is_active.is_(True))
        .order_by(RoutineVersion.created_at.desc())
    ).scalars().first()


def load_active_routine(db: Session, semester_id: str) -> FullRoutine:
    version = get_active_version(db, semester_id)
    if version is None:
        return {}
    return parse_routine(version.routine)


def load_routines(db: Session, semester_id: str | None = None) -> dict[str, FullRoutine]:
    query = select(RoutineVersion).where(RoutineVersion.is_active.is_(True))
    if semester_id is not None:
        query = query.where(RoutineVersion.semester_id == semester_id)
    routines: dict[str, FullRoutine] = {}
    for version in db.execute(query.order_by(RoutineVersion.created_at.desc())).scalars():
        if version.semester_id not in routines:
            routines[version.semester_id] = parse_routine(version.routine)
    return routines


def load_overrides(db: Session, semester_id: str) -> ScheduleOverrides:
    overrides: ScheduleOverrides = {}
    rows = db.execute(select(ScheduleOverride).where(ScheduleOverride.semester_id == semester_id)).scalars()
    for row in rows:
        detail = ClassDetail.model_validate(row.class_detail) if row.class_detail is not None else None
        overrides.setdefault(row.room_number, {}).setdefault(row.slot_string, {})[row.date] = detail
    return overrides


def load_snapshot(db: Session, semester_id: str | None = None) -> SemesterSnapshot:
    section_query = select(CourseSection)
    room_query = select(Room)
    if semester_id is not None:
        section_query = section_query.where(CourseSection.semester == semester_id)
        room_query = room_query.where(Room.semester_id == semester_id)

    return SemesterSnapshot(
        programs=load_programs(db),
        rooms=[RoomEntry.model_validate(row) for row in db.execute(room_query).scalars()],
        sections=[EnrollmentEntry.model_validate(row) for row in db.execute(section_query).scalars()],
        semester_configs=[
            SemesterConfig.model_validate(row) for row in db.execute(select(SemesterConfiguration)).scalars()
        ],
        default_slots=load_default_slots(db),
        routines=load_routines(db, semester_id),
        room_type_names={row.id: row.type_name for row in db.execute(select(RoomType)).scalars()},
    )
