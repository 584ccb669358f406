import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from routinedesk.api.deps import get_db
from routinedesk.models.routine import RoutineVersion
from routinedesk.models.schedule_log import ScheduleLog
from routinedesk.models.semester import SemesterConfiguration
from routinedesk.schemas.routine import (
    ActivateVersionRequest,
    OverrideUpdate,
    RoutineCellUpdate,
    RoutineVersionCreate,
    RoutineVersionOut,
    RoutineVersionSummary,
    ScheduleLogOut,
    dump_routine,
    parse_routine,
)
from routinedesk.schemas.semester import SemesterConfig, SemesterConfigOut
from routinedesk.services.schedule_log import apply_override, log_schedule_change
from routinedesk.services.snapshots import get_active_version, load_overrides

router = APIRouter()

logger = logging.getLogger(__name__)


@router.get("/configs", response_model=list[SemesterConfigOut])
def list_semester_configs(db: Session = Depends(get_db)) -> list[SemesterConfigOut]:
    return list(db.execute(select(SemesterConfiguration).order_by(SemesterConfiguration.target_semester)).scalars())


@router.put("/configs", response_model=SemesterConfigOut)
def upsert_semester_config(payload: SemesterConfig, db: Session = Depends(get_db)) -> SemesterConfigOut:
    type_configs = [item.model_dump(mode="json", by_alias=True) for item in payload.type_configs]
    config = db.execute(
        select(SemesterConfiguration).where(SemesterConfiguration.target_semester == payload.target_semester)
    ).scalar_one_or_none()
    if config is None:
        config = SemesterConfiguration(
            target_semester=payload.target_semester,
            source_semester=payload.source_semester,
            type_configs=type_configs,
        )
        db.add(config)
    else:
        config.source_semester = payload.source_semester
        config.type_configs = type_configs
    db.commit()
    db.refresh(config)
    return config


@router.get("/{semester_id}/routine", response_model=RoutineVersionOut)
def get_active_routine(semester_id: str, db: Session = Depends(get_db)) -> RoutineVersionOut:
    version = get_active_version(db, semester_id)
    if version is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active routine for this semester")
    return version


@router.get("/{semester_id}/routine/versions", response_model=list[RoutineVersionSummary])
def list_routine_versions(semester_id: str, db: Session = Depends(get_db)) -> list[RoutineVersionSummary]:
    return list(
        db.execute(
            select(RoutineVersion)
            .where(RoutineVersion.semester_id == semester_id)
            .order_by(RoutineVersion.created_at)
        ).scalars()
    )


def _activate(db: Session, semester_id: str, version: RoutineVersion) -> None:
    for other in db.execute(
        select(RoutineVersion).where(RoutineVersion.semester_id == semester_id, RoutineVersion.is_active.is_(True))
    ).scalars():
        if other.id != version.id:
            other.is_active = False
    version.is_active = True


@router.post(
    "/{semester_id}/routine/versions",
    response_model=RoutineVersionOut,
    status_code=status.HTTP_201_CREATED,
)
def create_routine_version(
    semester_id: str,
    payload: RoutineVersionCreate,
    db: Session = Depends(get_db),
) -> RoutineVersionOut:
    if payload.routine is not None:
        routine = payload.routine
    elif payload.copy_active:
        active = get_active_version(db, semester_id)
        routine = dict(active.routine) if active is not None else {}
    else:
        routine = {}

    version = RoutineVersion(semester_id=semester_id, label=payload.label, routine=routine, is_active=False)
    db.add(version)
    db.flush()
    if payload.activate or get_active_version(db, semester_id) is None:
        _activate(db, semester_id, version)
    db.commit()
    db.refresh(version)
    logger.info("Created routine version %s for %s (active=%s)", version.id, semester_id, version.is_active)
    return version


@router.put("/{semester_id}/routine/active", response_model=RoutineVersionOut)
def activate_routine_version(
    semester_id: str,
    payload: ActivateVersionRequest,
    db: Session = Depends(get_db),
) -> RoutineVersionOut:
    version = db.get(RoutineVersion, payload.version_id)
    if version is None or version.semester_id != semester_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Routine version not found")
    _activate(db, semester_id, version)
    if payload.publish:
        version.is_published = True
    db.commit()
    db.refresh(version)
    logger.info("Activated routine version %s for %s", version.id, semester_id)
    return version


@router.put("/{semester_id}/routine/cells", response_model=RoutineVersionOut)
def update_routine_cell(
    semester_id: str,
    payload: RoutineCellUpdate,
    db: Session = Depends(get_db),
) -> RoutineVersionOut:
    version = get_active_version(db, semester_id)
    if version is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active routine for this semester")

    routine = parse_routine(version.routine)
    cells = routine.setdefault(payload.day, {}).setdefault(payload.room_number, {})
    previous = cells.get(payload.slot_string)
    if payload.class_detail is None:
        cells.pop(payload.slot_string, None)
    else:
        cells[payload.slot_string] = payload.class_detail

    # The JSON column is replaced wholesale so the change is detected.
    version.routine = dump_routine(routine)
    log_schedule_change(
        db,
        semester_id=semester_id,
        day=payload.day,
        room_number=payload.room_number,
        slot_string=payload.slot_string,
        from_class=previous,
        to_class=payload.class_detail,
        actor_name=payload.actor_name,
    )
    db.commit()
    db.refresh(version)
    return version


@router.get("/{semester_id}/overrides")
def get_overrides(semester_id: str, db: Session = Depends(get_db)) -> dict:
    return {
        room_number: {
            slot_string: {
                on_date: detail.model_dump(by_alias=True, exclude_none=True) if detail is not None else None
                for on_date, detail in by_date.items()
            }
            for slot_string, by_date in slots.items()
        }
        for room_number, slots in load_overrides(db, semester_id).items()
    }


@router.put("/{semester_id}/overrides")
def update_override(semester_id: str, payload: OverrideUpdate, db: Session = Depends(get_db)) -> dict:
    apply_override(
        db,
        semester_id=semester_id,
        room_number=payload.room_number,
        slot_string=payload.slot_string,
        on_date=payload.date,
        class_detail=payload.class_detail,
        remove=payload.remove,
        actor_name=payload.actor_name,
    )
    db.commit()
    return {"success": True}


@router.get("/{semester_id}/history", response_model=list[ScheduleLogOut])
def list_schedule_history(
    semester_id: str,
    limit: int = Query(default=100, ge=1, le=1000),
    db: Session = Depends(get_db),
) -> list[ScheduleLogOut]:
    return list(
        db.execute(
            select(ScheduleLog)
            .where(ScheduleLog.semester_id == semester_id)
            .order_by(ScheduleLog.created_at.desc())
            .limit(limit)
        ).scalars()
    )
