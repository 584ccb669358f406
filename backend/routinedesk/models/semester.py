import uuid
from datetime import datetime

from sqlalchemy import DateTime, JSON, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from routinedesk.db.base import Base


class SemesterConfiguration(Base):
    __tablename__ = "semester_configurations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    target_semester: Mapped[str] = mapped_column(String(100), unique=True, index=True, nullable=False)
    source_semester: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    # [{"id": 1, "type": "Tri-Semester", "startDate": "2025-01-05", "endDate": "2025-04-20"}]
    type_configs: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
