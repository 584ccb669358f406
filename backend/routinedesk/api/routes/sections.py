import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from routinedesk.api.deps import PageParams, get_db, page_params
from routinedesk.models.section import CourseSection
from routinedesk.schemas.dashboard import Page
from routinedesk.schemas.section import (
    EnrollmentEntry,
    MergeRequest,
    SectionCreate,
    SectionImport,
    SectionImportResult,
    SectionOut,
    SectionUpdate,
)
from routinedesk.services.filtering import SearchFilter, apply_filters, paginate
from routinedesk.services.section_merge import validate_merge

router = APIRouter()

logger = logging.getLogger(__name__)


def _get_by_section_id(db: Session, section_id: str) -> CourseSection | None:
    return db.execute(select(CourseSection).where(CourseSection.section_id == section_id)).scalar_one_or_none()


@router.get("/", response_model=Page[SectionOut])
def list_sections(
    semester: str | None = Query(default=None, max_length=100),
    p_id: str | None = Query(default=None, max_length=50),
    teacher_id: str | None = Query(default=None, max_length=100),
    search: str | None = Query(default=None, max_length=200),
    paging: PageParams = Depends(page_params()),
    db: Session = Depends(get_db),
) -> Page[SectionOut]:
    query = select(CourseSection).order_by(CourseSection.course_code, CourseSection.section)
    if semester is not None:
        query = query.where(CourseSection.semester == semester)
    if p_id is not None:
        query = query.where(CourseSection.p_id == p_id)
    if teacher_id is not None:
        query = query.where(CourseSection.teacher_id == teacher_id)

    rows = [SectionOut.model_validate(row) for row in db.execute(query).scalars()]
    search_filter = SearchFilter(
        search,
        (
            lambda row: row.course_code,
            lambda row: row.course_title,
            lambda row: row.section,
            lambda row: row.teacher_name,
        ),
    )
    return paginate(apply_filters(rows, [search_filter]), paging.page, paging.page_size)


@router.post("/", response_model=SectionOut, status_code=status.HTTP_201_CREATED)
def create_section(payload: SectionCreate, db: Session = Depends(get_db)) -> SectionOut:
    if _get_by_section_id(db, payload.section_id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Section ID already exists")
    if payload.merged_with_section_id and _get_by_section_id(db, payload.merged_with_section_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Merge target section not found")
    section = CourseSection(**payload.model_dump())
    db.add(section)
    db.commit()
    db.refresh(section)
    return section


@router.post("/import", response_model=SectionImportResult)
def import_sections(payload: SectionImport, db: Session = Depends(get_db)) -> SectionImportResult:
    created = 0
    updated = 0
    for entry in payload.sections:
        existing = _get_by_section_id(db, entry.section_id)
        if existing is None:
            db.add(CourseSection(**entry.model_dump()))
            db.flush()
            created += 1
            continue
        for key, value in entry.model_dump(exclude={"section_id"}).items():
            setattr(existing, key, value)
        updated += 1
    db.commit()
    logger.info("Imported sections: %d created, %d updated", created, updated)
    return SectionImportResult(created=created, updated=updated)


@router.put("/{section_pk}", response_model=SectionOut)
def update_section(section_pk: str, payload: SectionUpdate, db: Session = Depends(get_db)) -> SectionOut:
    section = db.get(CourseSection, section_pk)
    if section is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Section not found")

    data = payload.model_dump(exclude_unset=True)
    for key, value in data.items():
        if value is not None or key == "weekly_class":
            setattr(section, key, value)
    db.commit()
    db.refresh(section)
    return section


@router.delete("/{section_pk}")
def delete_section(section_pk: str, db: Session = Depends(get_db)) -> dict:
    section = db.get(CourseSection, section_pk)
    if section is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Section not found")
    db.delete(section)
    db.commit()
    return {"success": True}


@router.post("/{section_id}/merge", response_model=SectionOut)
def merge_section(section_id: str, payload: MergeRequest, db: Session = Depends(get_db)) -> SectionOut:
    rows = list(
        db.execute(
            select(CourseSection).where(CourseSection.section_id.in_([section_id, payload.target_section_id]))
        ).scalars()
    )
    validate_merge([EnrollmentEntry.model_validate(row) for row in rows], section_id, payload.target_section_id)

    source = next(row for row in rows if row.section_id == section_id)
    source.merged_with_section_id = payload.target_section_id
    db.commit()
    db.refresh(source)
    logger.info("Merged section %s into %s", section_id, payload.target_section_id)
    return source


@router.delete("/{section_id}/merge", response_model=SectionOut)
def unmerge_section(section_id: str, db: Session = Depends(get_db)) -> SectionOut:
    section = _get_by_section_id(db, section_id)
    if section is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Section not found")
    section.merged_with_section_id = None
    db.commit()
    db.refresh(section)
    logger.info("Unmerged section %s", section_id)
    return section
