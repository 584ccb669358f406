from __future__ import annotations

import re
import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from routinedesk.models.time_slot import SlotType

# Week order used by the routine grid: the academic week starts on Saturday.
WEEK_DAYS: tuple[str, ...] = (
    "Saturday",
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
)
DAY_VALUES = set(WEEK_DAYS)

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def parse_time_to_minutes(value: str) -> int:
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM 24-hour format")
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def normalize_days(values: list[str]) -> list[str]:
    cleaned = {day.strip() for day in values if day and day.strip()}
    invalid = sorted(cleaned - DAY_VALUES)
    if invalid:
        raise ValueError(f"Invalid day value(s): {', '.join(invalid)}")
    return [day for day in WEEK_DAYS if day in cleaned]


class TimeSlotBase(BaseModel):
    type: SlotType
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_format(cls, value: str) -> str:
        value = value.strip()
        if not TIME_PATTERN.match(value):
            raise ValueError("Time must be in HH:MM 24-hour format")
        return value

    @model_validator(mode="after")
    def validate_order(self) -> "TimeSlotBase":
        if parse_time_to_minutes(self.end_time) <= parse_time_to_minutes(self.start_time):
            raise ValueError("endTime must be after startTime")
        return self


class TimeSlot(TimeSlotBase):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()), min_length=1, max_length=100)


class TimeSlotCreate(TimeSlotBase):
    pass


class TimeSlotUpdate(BaseModel):
    type: SlotType | None = None
    start_time: str | None = Field(default=None, alias="startTime")
    end_time: str | None = Field(default=None, alias="endTime")

    model_config = ConfigDict(populate_by_name=True)
