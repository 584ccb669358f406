from pydantic import BaseModel, Field, model_validator

from routinedesk.models.section import CourseType


class EnrollmentEntry(BaseModel):
    section_id: str = Field(min_length=1, max_length=100)
    semester: str = Field(min_length=1, max_length=100)
    p_id: str = Field(min_length=1, max_length=50)
    course_code: str = Field(min_length=1, max_length=50)
    course_title: str = Field(default="", max_length=200)
    section: str = Field(min_length=1, max_length=50)
    credit: float = Field(default=0.0, ge=0, le=100)
    type: str = Field(default="", max_length=50)
    level_term: str = Field(default="", max_length=20)
    course_type: CourseType = CourseType.not_applicable
    weekly_class: int | None = Field(default=None, ge=0, le=50)
    student_count: int = Field(default=0, ge=0)
    class_taken: int = Field(default=0, ge=0)
    teacher_id: str = Field(default="", max_length=100)
    teacher_name: str = Field(default="", max_length=200)
    designation: str = Field(default="", max_length=100)
    teacher_mobile: str = Field(default="", max_length=50)
    teacher_email: str = Field(default="", max_length=255)
    merged_with_section_id: str | None = Field(default=None, max_length=100)

    model_config = {"from_attributes": True}

    @model_validator(mode="after")
    def validate_merge_reference(self) -> "EnrollmentEntry":
        if self.merged_with_section_id == self.section_id:
            raise ValueError("A section cannot be merged with itself")
        return self


class SectionCreate(EnrollmentEntry):
    pass


class SectionUpdate(BaseModel):
    course_title: str | None = Field(default=None, max_length=200)
    credit: float | None = Field(default=None, ge=0, le=100)
    type: str | None = Field(default=None, max_length=50)
    level_term: str | None = Field(default=None, max_length=20)
    course_type: CourseType | None = None
    weekly_class: int | None = Field(default=None, ge=0, le=50)
    student_count: int | None = Field(default=None, ge=0)
    class_taken: int | None = Field(default=None, ge=0)
    teacher_id: str | None = Field(default=None, max_length=100)
    teacher_name: str | None = Field(default=None, max_length=200)
    designation: str | None = Field(default=None, max_length=100)
    teacher_mobile: str | None = Field(default=None, max_length=50)
    teacher_email: str | None = Field(default=None, max_length=255)


class SectionOut(EnrollmentEntry):
    id: str


class SectionImport(BaseModel):
    sections: list[SectionCreate] = Field(default_factory=list, max_length=5000)


class SectionImportResult(BaseModel):
    created: int
    updated: int


class MergeRequest(BaseModel):
    target_section_id: str = Field(min_length=1, max_length=100)
