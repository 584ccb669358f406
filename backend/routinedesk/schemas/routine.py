from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from routinedesk.schemas.time_slot import DAY_VALUES
from routinedesk.services.time_slots import canonical_slot_string


class ClassDetail(BaseModel):
    course_code: str = Field(alias="courseCode", min_length=1, max_length=50)
    course_name: str = Field(default="", alias="courseName", max_length=200)
    teacher: str = Field(default="", max_length=200)
    section: str = Field(min_length=1, max_length=50)
    color: str | None = Field(default=None, max_length=100)
    p_id: str | None = Field(default=None, alias="pId", max_length=50)
    class_taken: int | None = Field(default=None, alias="classTaken", ge=0)
    level_term: str | None = Field(default=None, alias="levelTerm", max_length=20)

    model_config = ConfigDict(populate_by_name=True)


DailyRoutine = dict[str, dict[str, ClassDetail]]
FullRoutine = dict[str, DailyRoutine]
ScheduleOverrides = dict[str, dict[str, dict[str, ClassDetail | None]]]

_routine_adapter: TypeAdapter[dict[str, dict[str, dict[str, ClassDetail | None]]]] = TypeAdapter(
    dict[str, dict[str, dict[str, ClassDetail | None]]]
)


def parse_routine(raw: dict | None) -> FullRoutine:
    """Validate a stored routine grid and normalize its slot keys.

    Empty cells (``None``) are dropped; a routine only records occupied cells.
    """
    parsed = _routine_adapter.validate_python(raw or {})
    routine: FullRoutine = {}
    for day, rooms in parsed.items():
        day_name = day.strip()
        if day_name not in DAY_VALUES:
            raise ValueError(f"Invalid day value: {day}")
        for room_number, slots in rooms.items():
            for slot_string, detail in slots.items():
                if detail is None:
                    continue
                routine.setdefault(day_name, {}).setdefault(room_number.strip(), {})[
                    canonical_slot_string(slot_string)
                ] = detail
    return routine


def dump_routine(routine: FullRoutine) -> dict:
    """JSON form of a routine; days and rooms without classes are left out."""
    dumped: dict = {}
    for day, rooms in routine.items():
        for room_number, slots in rooms.items():
            for slot_string, detail in slots.items():
                dumped.setdefault(day, {}).setdefault(room_number, {})[slot_string] = detail.model_dump(
                    by_alias=True, exclude_none=True
                )
    return dumped


def validate_iso_date(value: str) -> str:
    value = value.strip()
    try:
        date.fromisoformat(value)
    except ValueError as exc:
        raise ValueError("Date must be in YYYY-MM-DD format") from exc
    return value


class RoutinePayload(BaseModel):
    label: str = Field(default="", max_length=100)
    routine: dict = Field(default_factory=dict)

    @field_validator("routine")
    @classmethod
    def validate_routine(cls, value: dict) -> dict:
        return dump_routine(parse_routine(value))


class RoutineVersionCreate(BaseModel):
    label: str = Field(default="", max_length=100)
    routine: dict | None = None
    copy_active: bool = True
    activate: bool = True

    @field_validator("routine")
    @classmethod
    def validate_routine(cls, value: dict | None) -> dict | None:
        if value is None:
            return None
        return dump_routine(parse_routine(value))


class RoutineVersionOut(BaseModel):
    id: str
    semester_id: str
    label: str
    is_active: bool
    is_published: bool
    created_at: datetime | None = None
    routine: dict = Field(default_factory=dict)

    model_config = {"from_attributes": True}


class RoutineVersionSummary(BaseModel):
    id: str
    semester_id: str
    label: str
    is_active: bool
    is_published: bool
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class ActivateVersionRequest(BaseModel):
    version_id: str = Field(min_length=1, max_length=36)
    publish: bool = False


class RoutineCellUpdate(BaseModel):
    day: str
    room_number: str = Field(min_length=1, max_length=50)
    slot_string: str = Field(min_length=1, max_length=50)
    class_detail: ClassDetail | None = None
    actor_name: str | None = Field(default=None, max_length=200)

    @field_validator("day")
    @classmethod
    def validate_day(cls, value: str) -> str:
        day = value.strip()
        if day not in DAY_VALUES:
            raise ValueError("Invalid day value")
        return day

    @field_validator("slot_string")
    @classmethod
    def normalize_slot_string(cls, value: str) -> str:
        return canonical_slot_string(value)


class OverrideUpdate(BaseModel):
    room_number: str = Field(min_length=1, max_length=50)
    slot_string: str = Field(min_length=1, max_length=50)
    date: str
    class_detail: ClassDetail | None = None
    # Drop the override entirely and fall back to the weekly routine.
    remove: bool = False
    actor_name: str | None = Field(default=None, max_length=200)

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str) -> str:
        return validate_iso_date(value)

    @field_validator("slot_string")
    @classmethod
    def normalize_slot_string(cls, value: str) -> str:
        return canonical_slot_string(value)


class ScheduleLogOut(BaseModel):
    id: str
    semester_id: str
    day: str
    room_number: str
    slot_string: str
    is_override: bool
    date: str | None
    actor_name: str | None
    from_class: dict | None
    to_class: dict | None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
