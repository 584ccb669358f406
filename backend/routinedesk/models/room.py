import uuid
from datetime import datetime

from sqlalchemy import DateTime, Integer, JSON, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from routinedesk.db.base import Base


class RoomType(Base):
    __tablename__ = "room_types"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    type_name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)


class Room(Base):
    __tablename__ = "rooms"
    __table_args__ = (UniqueConstraint("semester_id", "room_number", name="uq_rooms_semester_room_number"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    room_number: Mapped[str] = mapped_column(String(50), index=True, nullable=False)
    building_id: Mapped[str] = mapped_column(String(36), nullable=False)
    floor_id: Mapped[str] = mapped_column(String(36), nullable=False)
    category_id: Mapped[str] = mapped_column(String(36), nullable=False)
    type_id: Mapped[str] = mapped_column(String(36), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    semester_id: Mapped[str | None] = mapped_column(String(100), index=True, nullable=True)
    assigned_to_pid: Mapped[str | None] = mapped_column(String(50), nullable=True)
    shared_with_pids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    room_specific_slots: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
