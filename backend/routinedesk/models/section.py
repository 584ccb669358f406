import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from routinedesk.db.base import Base
from routinedesk.models.time_slot import enum_values


class CourseType(str, Enum):
    theory = "Theory"
    lab = "Lab"
    thesis = "Thesis"
    project = "Project"
    internship = "Internship"
    viva = "Viva"
    others = "Others"
    not_applicable = "N/A"


class CourseSection(Base):
    __tablename__ = "course_sections"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    section_id: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    semester: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    p_id: Mapped[str] = mapped_column(String(50), index=True, nullable=False)
    course_code: Mapped[str] = mapped_column(String(50), nullable=False)
    course_title: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    section: Mapped[str] = mapped_column(String(50), nullable=False)
    credit: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    type: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    level_term: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    course_type: Mapped[CourseType] = mapped_column(
        SAEnum(CourseType, name="course_type", values_callable=enum_values),
        nullable=False,
        default=CourseType.not_applicable,
    )
    weekly_class: Mapped[int | None] = mapped_column(Integer, nullable=True)
    student_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    class_taken: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    teacher_id: Mapped[str] = mapped_column(String(100), index=True, nullable=False, default="")
    teacher_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    designation: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    teacher_mobile: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    teacher_email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    merged_with_section_id: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
