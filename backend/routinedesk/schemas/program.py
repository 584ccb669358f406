from pydantic import BaseModel, Field, field_validator

from routinedesk.models.program import ProgramType, SemesterSystem
from routinedesk.schemas.time_slot import TimeSlot, normalize_days


class ProgramEntry(BaseModel):
    p_id: str = Field(min_length=1, max_length=50)
    short_name: str = Field(min_length=1, max_length=50)
    full_name: str = Field(min_length=1, max_length=200)
    faculty: str = Field(default="", max_length=200)
    type: ProgramType = ProgramType.undergraduate
    semester_system: SemesterSystem
    active_days: list[str] = Field(default_factory=list, max_length=7)
    program_specific_slots: list[TimeSlot] = Field(default_factory=list, max_length=100)

    model_config = {"from_attributes": True}

    @field_validator("active_days")
    @classmethod
    def validate_active_days(cls, value: list[str]) -> list[str]:
        return normalize_days(value)


class ProgramCreate(ProgramEntry):
    pass


class ProgramUpdate(BaseModel):
    p_id: str | None = Field(default=None, min_length=1, max_length=50)
    short_name: str | None = Field(default=None, min_length=1, max_length=50)
    full_name: str | None = Field(default=None, min_length=1, max_length=200)
    faculty: str | None = Field(default=None, max_length=200)
    type: ProgramType | None = None
    semester_system: SemesterSystem | None = None
    active_days: list[str] | None = Field(default=None, max_length=7)
    program_specific_slots: list[TimeSlot] | None = Field(default=None, max_length=100)

    @field_validator("active_days")
    @classmethod
    def validate_active_days(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        return normalize_days(value)


class ProgramOut(ProgramEntry):
    id: str
