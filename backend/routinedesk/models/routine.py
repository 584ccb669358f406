import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, JSON, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from routinedesk.db.base import Base


class RoutineVersion(Base):
    __tablename__ = "routine_versions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    semester_id: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    label: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    # day -> room number -> slot string -> class detail
    routine: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


class ScheduleOverride(Base):
    __tablename__ = "schedule_overrides"
    __table_args__ = (
        UniqueConstraint("semester_id", "room_number", "slot_string", "date", name="uq_schedule_override_cell"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    semester_id: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    room_number: Mapped[str] = mapped_column(String(50), nullable=False)
    slot_string: Mapped[str] = mapped_column(String(50), nullable=False)
    date: Mapped[str] = mapped_column(String(10), nullable=False)
    # None marks the slot as explicitly freed on that date.
    class_detail: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
