from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Connection, Engine

from routinedesk.db.base import Base
import routinedesk.models  # noqa: F401

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: dict[str, set[str]] = {
    "programs": {"id", "p_id", "active_days", "program_specific_slots", "semester_system"},
    "rooms": {"id", "room_number", "semester_id", "assigned_to_pid", "shared_with_pids", "room_specific_slots"},
    "course_sections": {"id", "section_id", "merged_with_section_id", "class_taken", "weekly_class"},
    "routine_versions": {"id", "semester_id", "routine", "is_active"},
    "semester_configurations": {"id", "target_semester", "type_configs"},
    "attendance_logs": {"id", "semester_id", "date", "time_slot", "room_number", "course_code", "makeup_date"},
}


def ensure_schema(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ensured for %d tables", len(Base.metadata.tables))


def inspect_schema(connection: Connection) -> tuple[list[str], dict[str, list[str]]]:
    inspector = inspect(connection)
    table_names = set(inspector.get_table_names())
    missing_tables: list[str] = []
    missing_columns: dict[str, list[str]] = {}
    for table_name, columns in REQUIRED_COLUMNS.items():
        if table_name not in table_names:
            missing_tables.append(table_name)
            continue
        existing = {item["name"] for item in inspector.get_columns(table_name)}
        missing = sorted(columns - existing)
        if missing:
            missing_columns[table_name] = missing
    return missing_tables, missing_columns
