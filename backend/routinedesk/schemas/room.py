from pydantic import BaseModel, Field, field_validator, model_validator

from routinedesk.schemas.time_slot import TimeSlot


def _clean_pids(value: list[str]) -> list[str]:
    cleaned: list[str] = []
    for item in value:
        pid = item.strip()
        if pid and pid not in cleaned:
            cleaned.append(pid)
    return cleaned


class RoomEntry(BaseModel):
    room_number: str = Field(min_length=1, max_length=50)
    building_id: str = Field(min_length=1, max_length=36)
    floor_id: str = Field(min_length=1, max_length=36)
    category_id: str = Field(min_length=1, max_length=36)
    type_id: str = Field(min_length=1, max_length=36)
    capacity: int = Field(default=30, ge=0, le=5000)
    semester_id: str | None = Field(default=None, max_length=100)
    assigned_to_pid: str | None = Field(default=None, max_length=50)
    shared_with_pids: list[str] = Field(default_factory=list, max_length=200)
    room_specific_slots: list[TimeSlot] = Field(default_factory=list, max_length=100)

    model_config = {"from_attributes": True}

    @field_validator("shared_with_pids")
    @classmethod
    def clean_shared_pids(cls, value: list[str]) -> list[str]:
        return _clean_pids(value)

    @model_validator(mode="after")
    def validate_assignment(self) -> "RoomEntry":
        if self.assigned_to_pid and self.assigned_to_pid in self.shared_with_pids:
            raise ValueError("assigned_to_pid cannot also be listed in shared_with_pids")
        return self


class RoomCreate(RoomEntry):
    pass


class RoomUpdate(BaseModel):
    room_number: str | None = Field(default=None, min_length=1, max_length=50)
    building_id: str | None = Field(default=None, min_length=1, max_length=36)
    floor_id: str | None = Field(default=None, min_length=1, max_length=36)
    category_id: str | None = Field(default=None, min_length=1, max_length=36)
    type_id: str | None = Field(default=None, min_length=1, max_length=36)
    capacity: int | None = Field(default=None, ge=0, le=5000)
    semester_id: str | None = Field(default=None, max_length=100)
    assigned_to_pid: str | None = Field(default=None, max_length=50)
    shared_with_pids: list[str] | None = Field(default=None, max_length=200)
    room_specific_slots: list[TimeSlot] | None = Field(default=None, max_length=100)

    @field_validator("shared_with_pids")
    @classmethod
    def clean_shared_pids(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        return _clean_pids(value)


class RoomOut(RoomEntry):
    id: str


class RoomTypeCreate(BaseModel):
    type_name: str = Field(min_length=1, max_length=100)


class RoomTypeOut(RoomTypeCreate):
    id: str

    model_config = {"from_attributes": True}


class RoomCloneRequest(BaseModel):
    source_semester: str = Field(min_length=1, max_length=100)
    target_semester: str = Field(min_length=1, max_length=100)

    @model_validator(mode="after")
    def validate_distinct(self) -> "RoomCloneRequest":
        if self.source_semester == self.target_semester:
            raise ValueError("source_semester and target_semester must differ")
        return self


class RoomCloneResult(BaseModel):
    cloned: int
    skipped: list[str] = Field(default_factory=list)
