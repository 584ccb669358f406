from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from routinedesk.api.deps import get_db
from routinedesk.models.time_slot import DefaultTimeSlot
from routinedesk.schemas.time_slot import TimeSlot, TimeSlotBase, TimeSlotCreate, TimeSlotUpdate
from routinedesk.services.snapshots import load_default_slots
from routinedesk.services.time_slots import same_slot

router = APIRouter()


def _ensure_unique(db: Session, candidate: TimeSlotBase, exclude_id: str | None = None) -> None:
    for existing in load_default_slots(db):
        if existing.id != exclude_id and same_slot(existing, candidate):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Time slot already exists")


@router.get("/", response_model=list[TimeSlot])
def list_time_slots(db: Session = Depends(get_db)) -> list[TimeSlot]:
    return load_default_slots(db)


@router.post("/", response_model=TimeSlot, status_code=status.HTTP_201_CREATED)
def create_time_slot(payload: TimeSlotCreate, db: Session = Depends(get_db)) -> TimeSlot:
    _ensure_unique(db, payload)
    slot = DefaultTimeSlot(type=payload.type, start_time=payload.start_time, end_time=payload.end_time)
    db.add(slot)
    db.commit()
    db.refresh(slot)
    return TimeSlot.model_validate(slot)


@router.put("/{slot_id}", response_model=TimeSlot)
def update_time_slot(slot_id: str, payload: TimeSlotUpdate, db: Session = Depends(get_db)) -> TimeSlot:
    slot = db.get(DefaultTimeSlot, slot_id)
    if slot is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Time slot not found")

    data = payload.model_dump(exclude_unset=True)
    merged = {
        "type": slot.type,
        "start_time": slot.start_time,
        "end_time": slot.end_time,
        **{key: value for key, value in data.items() if value is not None},
    }
    try:
        candidate = TimeSlotBase.model_validate(merged)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    _ensure_unique(db, candidate, exclude_id=slot_id)

    slot.type = candidate.type
    slot.start_time = candidate.start_time
    slot.end_time = candidate.end_time
    db.commit()
    db.refresh(slot)
    return TimeSlot.model_validate(slot)


@router.delete("/{slot_id}")
def delete_time_slot(slot_id: str, db: Session = Depends(get_db)) -> dict:
    slot = db.get(DefaultTimeSlot, slot_id)
    if slot is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Time slot not found")
    db.delete(slot)
    db.commit()
    return {"success": True}
