from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from routinedesk.api.deps import PageParams, get_db, page_params
from routinedesk.models.attendance import AttendanceStatus
from routinedesk.schemas.attendance import (
    AttendanceClearResult,
    AttendanceLogCreate,
    AttendanceLogOut,
    AttendanceLogUpdate,
)
from routinedesk.schemas.dashboard import Page
from routinedesk.services import attendance as attendance_service
from routinedesk.services.attendance import MakeupStatus
from routinedesk.services.filtering import apply_filters, paginate

router = APIRouter()


@router.get("/{semester_id}/attendance", response_model=Page[AttendanceLogOut])
def list_attendance(
    semester_id: str,
    attendance_status: list[AttendanceStatus] = Query(default=[], alias="status"),
    scheduled_from: str | None = None,
    scheduled_to: str | None = None,
    makeup_from: str | None = None,
    makeup_to: str | None = None,
    makeup_status: MakeupStatus = "All",
    search: str | None = Query(default=None, max_length=200),
    paging: PageParams = Depends(page_params()),
    db: Session = Depends(get_db),
) -> Page[AttendanceLogOut]:
    filters = attendance_service.attendance_filters(
        statuses=attendance_status,
        scheduled_from=scheduled_from,
        scheduled_to=scheduled_to,
        makeup_from=makeup_from,
        makeup_to=makeup_to,
        makeup_status=makeup_status,
        search=search,
    )
    try:
        rows = apply_filters(attendance_service.list_entries(db, semester_id), filters)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return paginate(rows, paging.page, paging.page_size)


@router.post(
    "/{semester_id}/attendance",
    response_model=AttendanceLogOut,
    status_code=status.HTTP_201_CREATED,
)
def create_attendance(
    semester_id: str,
    payload: AttendanceLogCreate,
    actor_name: str | None = Query(default=None, max_length=200),
    db: Session = Depends(get_db),
) -> AttendanceLogOut:
    record = attendance_service.create_entry(db, semester_id, payload, actor_name)
    return attendance_service.to_out(record)


@router.put("/{semester_id}/attendance/{entry_id}", response_model=AttendanceLogOut)
def update_attendance(
    semester_id: str,
    entry_id: str,
    payload: AttendanceLogUpdate,
    actor_name: str | None = Query(default=None, max_length=200),
    db: Session = Depends(get_db),
) -> AttendanceLogOut:
    record = attendance_service.update_entry(db, semester_id, entry_id, payload, actor_name)
    return attendance_service.to_out(record)


@router.post("/{semester_id}/attendance/{entry_id}/makeup-status", response_model=AttendanceLogOut)
def toggle_makeup_status(semester_id: str, entry_id: str, db: Session = Depends(get_db)) -> AttendanceLogOut:
    record = attendance_service.toggle_makeup_completed(db, semester_id, entry_id)
    return attendance_service.to_out(record)


@router.delete("/{semester_id}/attendance/{entry_id}")
def delete_attendance(
    semester_id: str,
    entry_id: str,
    actor_name: str | None = Query(default=None, max_length=200),
    db: Session = Depends(get_db),
) -> dict:
    attendance_service.delete_entry(db, semester_id, entry_id, actor_name)
    return {"success": True}


@router.delete("/{semester_id}/attendance", response_model=AttendanceClearResult)
def clear_attendance(
    semester_id: str,
    actor_name: str | None = Query(default=None, max_length=200),
    db: Session = Depends(get_db),
) -> AttendanceClearResult:
    deleted, removed = attendance_service.clear_log(db, semester_id, actor_name)
    return AttendanceClearResult(deleted=deleted, overrides_removed=removed)
