import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, JSON, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from routinedesk.db.base import Base


class ScheduleLog(Base):
    __tablename__ = "schedule_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    semester_id: Mapped[str] = mapped_column(String(100), index=True, nullable=False)
    day: Mapped[str] = mapped_column(String(20), nullable=False)
    room_number: Mapped[str] = mapped_column(String(50), nullable=False)
    slot_string: Mapped[str] = mapped_column(String(50), nullable=False)
    is_override: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    date: Mapped[str | None] = mapped_column(String(10), nullable=True)
    actor_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    from_class: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    to_class: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
