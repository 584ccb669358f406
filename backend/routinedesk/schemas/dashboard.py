from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from routinedesk.schemas.section import EnrollmentEntry
from routinedesk.schemas.time_slot import TimeSlot

T = TypeVar("T")


class SlotOccupancy(BaseModel):
    booked: int = 0
    total: int = 0
    # None when total is zero: the dashboard shows "N/A" instead of a ratio.
    percentage: float | None = None


class OccupancyReport(BaseModel):
    days: list[str] = Field(default_factory=list)
    header_slots: list[TimeSlot] = Field(default_factory=list, alias="headerSlots")
    per_slot: dict[str, dict[str, SlotOccupancy]] = Field(default_factory=dict, alias="perSlot")
    per_day: dict[str, SlotOccupancy] = Field(default_factory=dict, alias="perDay")
    per_column: dict[str, SlotOccupancy] = Field(default_factory=dict, alias="perColumn")
    grand_total: SlotOccupancy = Field(default_factory=SlotOccupancy, alias="grandTotal")

    model_config = ConfigDict(populate_by_name=True)


class RoomOccupancy(BaseModel):
    room_number: str = Field(alias="roomNumber")
    theory: SlotOccupancy
    lab: SlotOccupancy

    model_config = ConfigDict(populate_by_name=True)


class SectionStats(BaseModel):
    section_id: str = Field(alias="sectionId")
    ciw: int
    cr: int
    cat: int

    model_config = ConfigDict(populate_by_name=True)


class TreeStats(BaseModel):
    students: int = 0
    ciw: int = 0
    cr: int = 0
    cat: int = 0


class DisplayCourse(EnrollmentEntry):
    children: list[DisplayCourse] = Field(default_factory=list)
    stats: TreeStats | None = None


class MergeIntegrityIssue(BaseModel):
    section_id: str = Field(alias="sectionId")
    merged_with_section_id: str | None = Field(default=None, alias="mergedWithSectionId")
    cycle: list[str] = Field(default_factory=list)
    message: str

    model_config = ConfigDict(populate_by_name=True)


class MergeForest(BaseModel):
    roots: list[DisplayCourse] = Field(default_factory=list)
    integrity_errors: list[MergeIntegrityIssue] = Field(default_factory=list, alias="integrityErrors")

    model_config = ConfigDict(populate_by_name=True)


class ForestTotals(BaseModel):
    credits: float = 0.0
    students: int = 0
    ciw: int = 0
    cr: int = 0
    cat: int = 0


class TeacherCourseSheet(BaseModel):
    teacher_id: str = Field(alias="teacherId")
    semester: str
    courses: list[DisplayCourse] = Field(default_factory=list)
    totals: ForestTotals = Field(default_factory=ForestTotals)
    integrity_errors: list[MergeIntegrityIssue] = Field(default_factory=list, alias="integrityErrors")

    model_config = ConfigDict(populate_by_name=True)


class TeacherSummary(BaseModel):
    employee_id: str = Field(alias="employeeId")
    teacher_name: str = Field(alias="teacherName")
    designation: str
    mobile: str
    email: str
    credit_load: float = Field(alias="creditLoad")
    courses: list[EnrollmentEntry] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class CourseSummary(BaseModel):
    p_id: str = Field(alias="pId")
    course_code: str = Field(alias="courseCode")
    course_title: str = Field(alias="courseTitle")
    credit: float
    type: str
    level_term: str = Field(alias="levelTerm")
    weekly_class: int | None = Field(default=None, alias="weeklyClass")
    section_count: int = Field(alias="sectionCount")
    total_students: int = Field(alias="totalStudents")
    total_ciw: int = Field(default=0, alias="totalCiw")
    total_cr: int = Field(default=0, alias="totalCr")
    total_cat: int = Field(alias="totalCat")
    sections: list[EnrollmentEntry] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class SectionRow(EnrollmentEntry):
    ciw: int = 0
    cr: int = 0


class DashboardSummary(BaseModel):
    teacher_count: int = Field(alias="teacherCount")
    unique_course_count: int = Field(alias="uniqueCourseCount")
    section_count: int = Field(alias="sectionCount")
    slot_requirement: int = Field(alias="slotRequirement")
    booked_slot_requirement: int = Field(alias="bookedSlotRequirement")
    room_count: int = Field(alias="roomCount")
    total_slots: int = Field(alias="totalSlots")
    booked_slots: int = Field(alias="bookedSlots")

    model_config = ConfigDict(populate_by_name=True)


class Page(BaseModel, Generic[T]):
    items: list[T] = Field(default_factory=list)
    page: int = 1
    page_size: int = Field(alias="pageSize")
    total_items: int = Field(alias="totalItems")
    total_pages: int = Field(alias="totalPages")

    model_config = ConfigDict(populate_by_name=True)
