"""Attendance log and the makeup classes it schedules.

An entry records how a scheduled class went on one date. When a makeup class
is arranged, the entry's course is written as a schedule override on the
makeup date, slot and room; moving, cancelling or deleting the makeup removes
that override again. Every override change lands in the schedule history.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Literal

from sqlalchemy import select
from sqlalchemy.orm import Session

from routinedesk.core.exceptions import DataIntegrityError, ResourceNotFoundError
from routinedesk.models.attendance import AttendanceLog, AttendanceStatus
from routinedesk.models.section import CourseSection
from routinedesk.schemas.attendance import (
    AttendanceLogCreate,
    AttendanceLogOut,
    AttendanceLogUpdate,
    MakeupClassDetails,
)
from routinedesk.schemas.routine import ClassDetail
from routinedesk.services.filtering import DateRangeFilter, Filter, MultiSelectFilter, SearchFilter
from routinedesk.services.schedule_log import apply_override

logger = logging.getLogger(__name__)

MakeupStatus = Literal["All", "Yes", "No"]


def makeup_of(record: AttendanceLog) -> MakeupClassDetails | None:
    if not (record.makeup_date and record.makeup_time_slot and record.makeup_room_number):
        return None
    return MakeupClassDetails(
        date=record.makeup_date,
        time_slot=record.makeup_time_slot,
        room_number=record.makeup_room_number,
    )


def to_out(record: AttendanceLog) -> AttendanceLogOut:
    return AttendanceLogOut(
        id=record.id,
        semester_id=record.semester_id,
        date=record.date,
        time_slot=record.time_slot,
        room_number=record.room_number,
        building_name=record.building_name,
        course_code=record.course_code,
        course_title=record.course_title,
        section=record.section,
        p_id=record.p_id,
        status=record.status,
        teacher_id=record.teacher_id,
        teacher_name=record.teacher_name,
        teacher_designation=record.teacher_designation,
        teacher_mobile=record.teacher_mobile,
        teacher_email=record.teacher_email,
        remark=record.remark,
        makeup_info=makeup_of(record),
        makeup_completed=record.makeup_completed,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def _makeup_status(entry: AttendanceLogOut) -> str | None:
    if entry.makeup_info is None:
        return None
    return "Yes" if entry.makeup_completed else "No"


def attendance_filters(
    *,
    statuses: Sequence[AttendanceStatus] = (),
    scheduled_from: str | None = None,
    scheduled_to: str | None = None,
    makeup_from: str | None = None,
    makeup_to: str | None = None,
    makeup_status: MakeupStatus = "All",
    search: str | None = None,
) -> list[Filter[AttendanceLogOut]]:
    return [
        MultiSelectFilter(lambda entry: entry.status, tuple(statuses)),
        DateRangeFilter(lambda entry: entry.date, scheduled_from, scheduled_to),
        DateRangeFilter(
            lambda entry: entry.makeup_info.date if entry.makeup_info else None, makeup_from, makeup_to
        ),
        MultiSelectFilter(_makeup_status, () if makeup_status == "All" else (makeup_status,)),
        SearchFilter(
            search,
            (
                lambda entry: entry.course_code,
                lambda entry: entry.course_title,
                lambda entry: entry.section,
                lambda entry: entry.p_id,
                lambda entry: entry.status.value,
                lambda entry: entry.date,
                lambda entry: entry.time_slot,
                lambda entry: entry.room_number,
                lambda entry: entry.building_name,
                lambda entry: entry.teacher_id,
                lambda entry: entry.teacher_name,
                lambda entry: entry.teacher_designation,
                lambda entry: entry.remark,
                lambda entry: entry.makeup_info.date if entry.makeup_info else None,
                lambda entry: entry.makeup_info.room_number if entry.makeup_info else None,
            ),
        ),
    ]


def list_entries(db: Session, semester_id: str) -> list[AttendanceLogOut]:
    """Entries of a semester, most recently logged first."""
    rows = db.execute(
        select(AttendanceLog)
        .where(AttendanceLog.semester_id == semester_id)
        .order_by(AttendanceLog.created_at.desc(), AttendanceLog.date.desc(), AttendanceLog.time_slot)
    ).scalars()
    return [to_out(row) for row in rows]


def get_entry(db: Session, semester_id: str, entry_id: str) -> AttendanceLog:
    record = db.get(AttendanceLog, entry_id)
    if record is None or record.semester_id != semester_id:
        raise ResourceNotFoundError("Attendance log entry", entry_id)
    return record


def _ensure_unique(
    db: Session,
    semester_id: str,
    *,
    on_date: str,
    time_slot: str,
    room_number: str,
    course_code: str,
    exclude_id: str | None = None,
) -> None:
    query = select(AttendanceLog.id).where(
        AttendanceLog.semester_id == semester_id,
        AttendanceLog.date == on_date,
        AttendanceLog.time_slot == time_slot,
        AttendanceLog.room_number == room_number,
        AttendanceLog.course_code == course_code,
    )
    if exclude_id is not None:
        query = query.where(AttendanceLog.id != exclude_id)
    if db.execute(query).first() is not None:
        raise DataIntegrityError(
            "An attendance entry for this class at this time and room already exists",
            details={"date": on_date, "time_slot": time_slot, "room_number": room_number, "course_code": course_code},
        )


def makeup_class_detail(db: Session, semester_id: str, record: AttendanceLog) -> ClassDetail:
    """Routine cell content for the makeup class of ``record``'s section."""
    candidates = list(
        db.execute(
            select(CourseSection)
            .where(
                CourseSection.semester == semester_id,
                CourseSection.course_code == record.course_code,
                CourseSection.section == record.section,
            )
            .order_by(CourseSection.section_id)
        ).scalars()
    )
    if not candidates:
        raise ResourceNotFoundError("Section", f"{record.course_code} {record.section}")
    # Merged sections share code and label across programs; prefer the logged program.
    section = next((item for item in candidates if item.p_id == record.p_id), candidates[0])
    return ClassDetail(
        courseCode=section.course_code,
        courseName=section.course_title,
        teacher=section.teacher_name,
        section=section.section,
        pId=section.p_id,
        classTaken=section.class_taken,
        levelTerm=section.level_term or None,
    )


def _schedule_makeup(db: Session, record: AttendanceLog, actor_name: str | None) -> None:
    makeup = makeup_of(record)
    if makeup is None:
        return
    apply_override(
        db,
        semester_id=record.semester_id,
        room_number=makeup.room_number,
        slot_string=makeup.time_slot,
        on_date=makeup.date,
        class_detail=makeup_class_detail(db, record.semester_id, record),
        actor_name=actor_name,
    )


def _cancel_makeup(db: Session, semester_id: str, makeup: MakeupClassDetails | None, actor_name: str | None) -> bool:
    if makeup is None:
        return False
    return apply_override(
        db,
        semester_id=semester_id,
        room_number=makeup.room_number,
        slot_string=makeup.time_slot,
        on_date=makeup.date,
        class_detail=None,
        remove=True,
        actor_name=actor_name,
    )


def _set_makeup_columns(record: AttendanceLog, makeup: MakeupClassDetails | None) -> None:
    record.makeup_date = makeup.date if makeup else None
    record.makeup_time_slot = makeup.time_slot if makeup else None
    record.makeup_room_number = makeup.room_number if makeup else None


def create_entry(
    db: Session,
    semester_id: str,
    payload: AttendanceLogCreate,
    actor_name: str | None = None,
) -> AttendanceLog:
    _ensure_unique(
        db,
        semester_id,
        on_date=payload.date,
        time_slot=payload.time_slot,
        room_number=payload.room_number,
        course_code=payload.course_code,
    )
    record = AttendanceLog(semester_id=semester_id, **payload.model_dump(exclude={"makeup_info"}))
    _set_makeup_columns(record, payload.makeup_info)
    db.add(record)
    _schedule_makeup(db, record, actor_name)
    db.commit()
    db.refresh(record)
    logger.info("Logged attendance %s for %s %s on %s", record.id, record.course_code, record.section, record.date)
    return record


def update_entry(
    db: Session,
    semester_id: str,
    entry_id: str,
    payload: AttendanceLogUpdate,
    actor_name: str | None = None,
) -> AttendanceLog:
    record = get_entry(db, semester_id, entry_id)
    changes = payload.model_dump(exclude_unset=True)
    new_makeup_given = "makeup_info" in changes
    new_makeup = payload.makeup_info
    changes.pop("makeup_info", None)
    for field_name, value in changes.items():
        if value is None and field_name != "remark":
            continue
        setattr(record, field_name, value)

    _ensure_unique(
        db,
        semester_id,
        on_date=record.date,
        time_slot=record.time_slot,
        room_number=record.room_number,
        course_code=record.course_code,
        exclude_id=record.id,
    )

    if new_makeup_given:
        old_makeup = makeup_of(record)
        if old_makeup is not None and old_makeup != new_makeup:
            _cancel_makeup(db, semester_id, old_makeup, actor_name)
        _set_makeup_columns(record, new_makeup)
        if new_makeup is None:
            record.makeup_completed = False
        else:
            _schedule_makeup(db, record, actor_name)

    db.commit()
    db.refresh(record)
    return record


def delete_entry(db: Session, semester_id: str, entry_id: str, actor_name: str | None = None) -> None:
    record = get_entry(db, semester_id, entry_id)
    _cancel_makeup(db, semester_id, makeup_of(record), actor_name)
    db.delete(record)
    db.commit()
    logger.info("Deleted attendance entry %s", entry_id)


def clear_log(db: Session, semester_id: str, actor_name: str | None = None) -> tuple[int, int]:
    """Delete every entry of a semester; returns (entries deleted, makeup overrides removed)."""
    records = list(db.execute(select(AttendanceLog).where(AttendanceLog.semester_id == semester_id)).scalars())
    removed = 0
    for record in records:
        if _cancel_makeup(db, semester_id, makeup_of(record), actor_name):
            removed += 1
        db.delete(record)
    db.commit()
    logger.info(
        "Cleared %d attendance entries for %s (%d makeup overrides removed)", len(records), semester_id, removed
    )
    return len(records), removed


def toggle_makeup_completed(db: Session, semester_id: str, entry_id: str) -> AttendanceLog:
    record = get_entry(db, semester_id, entry_id)
    if makeup_of(record) is None:
        raise DataIntegrityError("No makeup class is scheduled for this entry", details={"entry_id": entry_id})
    record.makeup_completed = not record.makeup_completed
    db.commit()
    db.refresh(record)
    return record
