from pydantic import BaseModel, ConfigDict, Field

from routinedesk.models.program import SemesterSystem


class SemesterTypeConfig(BaseModel):
    id: int = 0
    type: SemesterSystem
    # Dates stay as raw strings; class requirement counting treats bad values as "no range".
    start_date: str = Field(default="", alias="startDate", max_length=30)
    end_date: str = Field(default="", alias="endDate", max_length=30)

    model_config = ConfigDict(populate_by_name=True)


class SemesterConfig(BaseModel):
    target_semester: str = Field(min_length=1, max_length=100)
    source_semester: str = Field(default="", max_length=100)
    type_configs: list[SemesterTypeConfig] = Field(default_factory=list, max_length=10)

    model_config = ConfigDict(from_attributes=True)


class SemesterConfigOut(SemesterConfig):
    id: str
