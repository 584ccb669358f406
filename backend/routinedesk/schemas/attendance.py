from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from routinedesk.models.attendance import AttendanceStatus
from routinedesk.schemas.routine import validate_iso_date
from routinedesk.services.time_slots import canonical_slot_string


class MakeupClassDetails(BaseModel):
    date: str
    time_slot: str = Field(min_length=1, max_length=50)
    room_number: str = Field(min_length=1, max_length=50)

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str) -> str:
        return validate_iso_date(value)

    @field_validator("time_slot")
    @classmethod
    def normalize_time_slot(cls, value: str) -> str:
        return canonical_slot_string(value)

    @field_validator("room_number")
    @classmethod
    def strip_room_number(cls, value: str) -> str:
        return value.strip()


class AttendanceLogBase(BaseModel):
    date: str
    time_slot: str = Field(min_length=1, max_length=50)
    room_number: str = Field(min_length=1, max_length=50)
    building_name: str = Field(default="", max_length=200)
    course_code: str = Field(min_length=1, max_length=50)
    course_title: str = Field(default="", max_length=200)
    section: str = Field(min_length=1, max_length=50)
    p_id: str = Field(default="", max_length=50)
    status: AttendanceStatus
    teacher_id: str = Field(default="", max_length=100)
    teacher_name: str = Field(default="", max_length=200)
    teacher_designation: str = Field(default="", max_length=100)
    teacher_mobile: str = Field(default="", max_length=50)
    teacher_email: str = Field(default="", max_length=255)
    remark: str | None = Field(default=None, max_length=2000)
    makeup_info: MakeupClassDetails | None = None
    makeup_completed: bool = False

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str) -> str:
        return validate_iso_date(value)

    @field_validator("time_slot")
    @classmethod
    def normalize_time_slot(cls, value: str) -> str:
        return canonical_slot_string(value)


class AttendanceLogCreate(AttendanceLogBase):
    pass


class AttendanceLogUpdate(BaseModel):
    """Partial update; sending ``makeup_info: null`` cancels the makeup class."""

    date: str | None = None
    time_slot: str | None = Field(default=None, min_length=1, max_length=50)
    room_number: str | None = Field(default=None, min_length=1, max_length=50)
    building_name: str | None = Field(default=None, max_length=200)
    status: AttendanceStatus | None = None
    remark: str | None = Field(default=None, max_length=2000)
    makeup_info: MakeupClassDetails | None = None
    makeup_completed: bool | None = None

    @field_validator("date")
    @classmethod
    def validate_date(cls, value: str | None) -> str | None:
        return validate_iso_date(value) if value is not None else None

    @field_validator("time_slot")
    @classmethod
    def normalize_time_slot(cls, value: str | None) -> str | None:
        return canonical_slot_string(value) if value is not None else None


class AttendanceLogOut(AttendanceLogBase):
    id: str
    semester_id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AttendanceClearResult(BaseModel):
    deleted: int
    overrides_removed: int
