import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from routinedesk.api.deps import get_db
from routinedesk.models.room import Room, RoomType
from routinedesk.schemas.room import (
    RoomCloneRequest,
    RoomCloneResult,
    RoomCreate,
    RoomEntry,
    RoomOut,
    RoomTypeCreate,
    RoomTypeOut,
    RoomUpdate,
)

router = APIRouter()

logger = logging.getLogger(__name__)


def _dump_slots(slots) -> list[dict]:
    return [slot.model_dump(mode="json", by_alias=True) for slot in slots]


def _room_number_taken(db: Session, semester_id: str | None, room_number: str, exclude_id: str | None = None) -> bool:
    query = select(Room).where(Room.room_number == room_number, Room.semester_id == semester_id)
    if exclude_id is not None:
        query = query.where(Room.id != exclude_id)
    return db.execute(query).first() is not None


@router.get("/", response_model=list[RoomOut])
def list_rooms(
    semester_id: str | None = Query(default=None, max_length=100),
    db: Session = Depends(get_db),
) -> list[RoomOut]:
    query = select(Room).order_by(Room.room_number)
    if semester_id is not None:
        query = query.where(Room.semester_id == semester_id)
    return list(db.execute(query).scalars())


@router.get("/types", response_model=list[RoomTypeOut])
def list_room_types(db: Session = Depends(get_db)) -> list[RoomTypeOut]:
    return list(db.execute(select(RoomType).order_by(RoomType.type_name)).scalars())


@router.post("/types", response_model=RoomTypeOut, status_code=status.HTTP_201_CREATED)
def create_room_type(payload: RoomTypeCreate, db: Session = Depends(get_db)) -> RoomTypeOut:
    name = payload.type_name.strip()
    existing = db.execute(select(RoomType).where(RoomType.type_name == name)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Room type already exists")
    room_type = RoomType(type_name=name)
    db.add(room_type)
    db.commit()
    db.refresh(room_type)
    return room_type


@router.post("/clone", response_model=RoomCloneResult)
def clone_rooms(payload: RoomCloneRequest, db: Session = Depends(get_db)) -> RoomCloneResult:
    sources = list(db.execute(select(Room).where(Room.semester_id == payload.source_semester)).scalars())
    cloned = 0
    skipped: list[str] = []
    for source in sources:
        if _room_number_taken(db, payload.target_semester, source.room_number):
            skipped.append(source.room_number)
            continue
        db.add(
            Room(
                room_number=source.room_number,
                building_id=source.building_id,
                floor_id=source.floor_id,
                category_id=source.category_id,
                type_id=source.type_id,
                capacity=source.capacity,
                semester_id=payload.target_semester,
                assigned_to_pid=source.assigned_to_pid,
                shared_with_pids=list(source.shared_with_pids or []),
                room_specific_slots=[
                    {**slot, "id": str(uuid.uuid4())} for slot in (source.room_specific_slots or [])
                ],
            )
        )
        cloned += 1
    db.commit()
    logger.info(
        "Cloned %d rooms from %s to %s (%d skipped)",
        cloned,
        payload.source_semester,
        payload.target_semester,
        len(skipped),
    )
    return RoomCloneResult(cloned=cloned, skipped=skipped)


@router.get("/{room_id}", response_model=RoomOut)
def get_room(room_id: str, db: Session = Depends(get_db)) -> RoomOut:
    room = db.get(Room, room_id)
    if room is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    return room


@router.post("/", response_model=RoomOut, status_code=status.HTTP_201_CREATED)
def create_room(payload: RoomCreate, db: Session = Depends(get_db)) -> RoomOut:
    if _room_number_taken(db, payload.semester_id, payload.room_number):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Room number already exists in this semester")
    data = payload.model_dump(exclude={"room_specific_slots"})
    room = Room(**data, room_specific_slots=_dump_slots(payload.room_specific_slots))
    db.add(room)
    db.commit()
    db.refresh(room)
    return room


@router.put("/{room_id}", response_model=RoomOut)
def update_room(room_id: str, payload: RoomUpdate, db: Session = Depends(get_db)) -> RoomOut:
    room = db.get(Room, room_id)
    if room is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")

    data = payload.model_dump(exclude_unset=True)
    if payload.room_specific_slots is not None:
        data["room_specific_slots"] = _dump_slots(payload.room_specific_slots)

    merged = RoomEntry.model_validate(room).model_dump()
    merged.update(data)
    try:
        RoomEntry.model_validate(merged)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    if _room_number_taken(db, merged["semester_id"], merged["room_number"], exclude_id=room_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Room number already exists in this semester")

    for key, value in data.items():
        setattr(room, key, value)
    db.commit()
    db.refresh(room)
    return room


@router.delete("/{room_id}")
def delete_room(room_id: str, db: Session = Depends(get_db)) -> dict:
    room = db.get(Room, room_id)
    if room is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    db.delete(room)
    db.commit()
    return {"success": True}
