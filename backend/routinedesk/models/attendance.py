import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, Enum as SAEnum, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from routinedesk.db.base import Base
from routinedesk.models.time_slot import enum_values


class AttendanceStatus(str, Enum):
    class_going = "Class is going"
    both_absent = "Student and Teacher both are absent"
    teacher_absent = "Students present but teacher absent"
    students_absent = "Teacher present but students are absent"


class AttendanceLog(Base):
    __tablename__ = "attendance_logs"
    __table_args__ = (
        UniqueConstraint(
            "semester_id", "date", "time_slot", "room_number", "course_code", name="uq_attendance_log_class"
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    semester_id: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    date: Mapped[str] = mapped_column(String(10), nullable=False)
    time_slot: Mapped[str] = mapped_column(String(50), nullable=False)
    room_number: Mapped[str] = mapped_column(String(50), nullable=False)
    building_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    course_code: Mapped[str] = mapped_column(String(50), nullable=False)
    course_title: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    section: Mapped[str] = mapped_column(String(50), nullable=False)
    p_id: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    status: Mapped[AttendanceStatus] = mapped_column(
        SAEnum(AttendanceStatus, name="attendance_status", values_callable=enum_values),
        nullable=False,
    )
    teacher_id: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    teacher_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    teacher_designation: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    teacher_mobile: Mapped[str] = mapped_column(String(50), nullable=False, default="")
    teacher_email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    remark: Mapped[str | None] = mapped_column(Text, nullable=True)
    # The makeup class, when one was arranged, is mirrored as a schedule override.
    makeup_date: Mapped[str | None] = mapped_column(String(10), nullable=True)
    makeup_time_slot: Mapped[str | None] = mapped_column(String(50), nullable=True)
    makeup_room_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    makeup_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
