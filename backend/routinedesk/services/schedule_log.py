from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from routinedesk.models.routine import ScheduleOverride
from routinedesk.models.schedule_log import ScheduleLog
from routinedesk.schemas.routine import ClassDetail, parse_routine
from routinedesk.services.snapshots import get_active_version
from routinedesk.services.time_slots import weekday_name


def _snapshot(detail: ClassDetail | None) -> dict | None:
    if detail is None:
        return None
    return detail.model_dump(by_alias=True, exclude_none=True)


def log_schedule_change(
    db: Session,
    *,
    semester_id: str,
    day: str,
    room_number: str,
    slot_string: str,
    from_class: ClassDetail | None,
    to_class: ClassDetail | None,
    actor_name: str | None = None,
    is_override: bool = False,
    date: str | None = None,
) -> None:
    record = ScheduleLog(
        semester_id=semester_id,
        day=day,
        room_number=room_number,
        slot_string=slot_string,
        is_override=is_override,
        date=date,
        actor_name=actor_name,
        from_class=_snapshot(from_class),
        to_class=_snapshot(to_class),
    )
    db.add(record)


def apply_override(
    db: Session,
    *,
    semester_id: str,
    room_number: str,
    slot_string: str,
    on_date: str,
    class_detail: ClassDetail | None,
    remove: bool = False,
    actor_name: str | None = None,
) -> bool:
    """Set, free or remove the override of one cell on one date and log it.

    ``class_detail=None`` frees the slot on that date; ``remove=True`` drops the
    override so the weekly routine applies again. Removing an override that
    does not exist changes nothing and returns False. The caller commits.
    """
    day = weekday_name(on_date)
    record = db.execute(
        select(ScheduleOverride).where(
            ScheduleOverride.semester_id == semester_id,
            ScheduleOverride.room_number == room_number,
            ScheduleOverride.slot_string == slot_string,
            ScheduleOverride.date == on_date,
        )
    ).scalar_one_or_none()

    if remove and record is None:
        return False

    if record is not None:
        previous = ClassDetail.model_validate(record.class_detail) if record.class_detail is not None else None
    else:
        version = get_active_version(db, semester_id)
        routine = parse_routine(version.routine) if version is not None else {}
        previous = routine.get(day, {}).get(room_number, {}).get(slot_string)

    if remove:
        db.delete(record)
        db.flush()
        new_value = None
    else:
        stored = _snapshot(class_detail)
        if record is None:
            db.add(
                ScheduleOverride(
                    semester_id=semester_id,
                    room_number=room_number,
                    slot_string=slot_string,
                    date=on_date,
                    class_detail=stored,
                )
            )
        else:
            record.class_detail = stored
        new_value = class_detail

    log_schedule_change(
        db,
        semester_id=semester_id,
        day=day or "",
        room_number=room_number,
        slot_string=slot_string,
        from_class=previous,
        to_class=new_value,
        actor_name=actor_name,
        is_override=True,
        date=on_date,
    )
    return True
