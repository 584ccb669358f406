from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from routinedesk.api.deps import get_db
from routinedesk.models.program import Program
from routinedesk.schemas.program import ProgramCreate, ProgramOut, ProgramUpdate

router = APIRouter()


def _dump_slots(slots) -> list[dict]:
    return [slot.model_dump(mode="json", by_alias=True) for slot in slots]


@router.get("/", response_model=list[ProgramOut])
def list_programs(db: Session = Depends(get_db)) -> list[ProgramOut]:
    return list(db.execute(select(Program).order_by(Program.p_id)).scalars())


@router.get("/{program_id}", response_model=ProgramOut)
def get_program(program_id: str, db: Session = Depends(get_db)) -> ProgramOut:
    program = db.get(Program, program_id)
    if program is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Program not found")
    return program


@router.post("/", response_model=ProgramOut, status_code=status.HTTP_201_CREATED)
def create_program(payload: ProgramCreate, db: Session = Depends(get_db)) -> ProgramOut:
    existing = db.execute(select(Program).where(Program.p_id == payload.p_id)).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Program P-ID already exists")
    data = payload.model_dump(exclude={"program_specific_slots"})
    program = Program(**data, program_specific_slots=_dump_slots(payload.program_specific_slots))
    db.add(program)
    db.commit()
    db.refresh(program)
    return program


@router.put("/{program_id}", response_model=ProgramOut)
def update_program(program_id: str, payload: ProgramUpdate, db: Session = Depends(get_db)) -> ProgramOut:
    program = db.get(Program, program_id)
    if program is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Program not found")

    data = payload.model_dump(exclude_unset=True)
    if "p_id" in data:
        existing = db.execute(
            select(Program).where(Program.p_id == data["p_id"], Program.id != program_id)
        ).scalar_one_or_none()
        if existing:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Program P-ID already exists")
    if payload.program_specific_slots is not None:
        data["program_specific_slots"] = _dump_slots(payload.program_specific_slots)

    for key, value in data.items():
        if value is not None:
            setattr(program, key, value)
    db.commit()
    db.refresh(program)
    return program


@router.delete("/{program_id}")
def delete_program(program_id: str, db: Session = Depends(get_db)) -> dict:
    program = db.get(Program, program_id)
    if program is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Program not found")
    db.delete(program)
    db.commit()
    return {"success": True}
