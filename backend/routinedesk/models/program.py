import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, JSON, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from routinedesk.db.base import Base
from routinedesk.models.time_slot import enum_values


class ProgramType(str, Enum):
    undergraduate = "Undergraduate"
    postgraduate = "Postgraduate"
    doctoral = "Doctoral"
    diploma = "Diploma"
    certificate = "Certificate"
    other = "Other"


class SemesterSystem(str, Enum):
    tri_semester = "Tri-Semester"
    bi_semester = "Bi-Semester"


class Program(Base):
    __tablename__ = "programs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    p_id: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    short_name: Mapped[str] = mapped_column(String(50), nullable=False)
    full_name: Mapped[str] = mapped_column(String(200), nullable=False)
    faculty: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    type: Mapped[ProgramType] = mapped_column(
        SAEnum(ProgramType, name="program_type", values_callable=enum_values),
        nullable=False,
        default=ProgramType.undergraduate,
    )
    semester_system: Mapped[SemesterSystem] = mapped_column(
        SAEnum(SemesterSystem, name="semester_system", values_callable=enum_values), nullable=False
    )
    active_days: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    program_specific_slots: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
