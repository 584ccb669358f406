from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from routinedesk.api.deps import PageParams, get_dashboard_scope, get_db, page_params
from routinedesk.models.room import Room
from routinedesk.schemas.dashboard import (
    CourseSummary,
    DashboardSummary,
    OccupancyReport,
    Page,
    RoomOccupancy,
    SectionRow,
    SectionStats,
    TeacherCourseSheet,
    TeacherSummary,
)
from routinedesk.schemas.room import RoomEntry
from routinedesk.services import dashboard as dashboard_service
from routinedesk.services.dashboard import DashboardScope
from routinedesk.services.filtering import apply_filters, paginate
from routinedesk.services.occupancy import compute_occupancy, room_occupancy_stats
from routinedesk.services.snapshots import (
    load_active_routine,
    load_default_slots,
    load_overrides,
    load_programs,
    load_snapshot,
)
from routinedesk.services.time_slots import weekday_name

router = APIRouter()


def _require_semester(scope: DashboardScope) -> str:
    if not scope.semester_id:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="semester_id is required")
    return scope.semester_id


@router.get("/occupancy", response_model=OccupancyReport)
def occupancy(
    on_date: str | None = Query(default=None, alias="date", description="ISO date for override lookup"),
    scope: DashboardScope = Depends(get_dashboard_scope),
    db: Session = Depends(get_db),
) -> OccupancyReport:
    semester_id = _require_semester(scope)
    if on_date is not None and weekday_name(on_date) is None:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="date must be YYYY-MM-DD")
    snapshot = load_snapshot(db, semester_id)
    rooms = dashboard_service.scope_rooms(
        snapshot.rooms, scope, snapshot.programs, snapshot.room_type_names, snapshot.configured_semesters
    )
    return compute_occupancy(
        rooms,
        snapshot.programs,
        snapshot.routine_for(semester_id),
        snapshot.default_slots,
        scope.tab,
        scope_pids=scope.program_pids(snapshot.programs),
        selected_pid=scope.selected_pid,
        on_date=on_date,
        overrides=load_overrides(db, semester_id) if on_date else None,
    )


@router.get("/summary", response_model=DashboardSummary)
def summary(
    scope: DashboardScope = Depends(get_dashboard_scope),
    db: Session = Depends(get_db),
) -> DashboardSummary:
    snapshot = load_snapshot(db, scope.semester_id)
    return dashboard_service.dashboard_summary(
        snapshot.sections,
        snapshot.rooms,
        snapshot.programs,
        snapshot.routines,
        snapshot.default_slots,
        scope,
        snapshot.ciw_counts,
        snapshot.room_type_names,
        snapshot.configured_semesters,
    )


@router.get("/section-stats", response_model=list[SectionStats])
def section_stats(
    scope: DashboardScope = Depends(get_dashboard_scope),
    db: Session = Depends(get_db),
) -> list[SectionStats]:
    snapshot = load_snapshot(db, scope.semester_id)
    sections = dashboard_service.scope_sections(snapshot.sections, scope, snapshot.programs)
    return dashboard_service.section_stats(sections, snapshot.ciw_counts, snapshot.cr_counts)


@router.get("/teachers", response_model=Page[TeacherSummary])
def teachers(
    designation: list[str] = Query(default=[]),
    program: list[str] = Query(default=[]),
    min_credit: str | None = Query(default=None),
    max_credit: str | None = Query(default=None),
    search: str | None = Query(default=None, max_length=200),
    paging: PageParams = Depends(page_params("teacher_page_size")),
    scope: DashboardScope = Depends(get_dashboard_scope),
    db: Session = Depends(get_db),
) -> Page[TeacherSummary]:
    semester_id = _require_semester(scope)
    snapshot = load_snapshot(db, semester_id)
    # Teacher lists are not split by the Theory/Lab tab.
    sections = dashboard_service.scope_sections(
        snapshot.sections, DashboardScope(semester_id, scope.selected_pid, scope.accessible_pids), snapshot.programs
    )
    filters = dashboard_service.teacher_filters(
        designations=designation,
        program_pids=program,
        min_credit=min_credit,
        max_credit=max_credit,
        search=search,
    )
    try:
        rows = apply_filters(dashboard_service.summarize_teachers(sections), filters)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return paginate(rows, paging.page, paging.page_size)


@router.get("/teachers/{teacher_id}/courses", response_model=TeacherCourseSheet)
def teacher_courses(
    teacher_id: str,
    scope: DashboardScope = Depends(get_dashboard_scope),
    db: Session = Depends(get_db),
) -> TeacherCourseSheet:
    semester_id = _require_semester(scope)
    snapshot = load_snapshot(db, semester_id)
    return dashboard_service.teacher_course_sheet(
        teacher_id, semester_id, snapshot.sections, snapshot.ciw_counts, snapshot.cr_counts
    )


@router.get("/courses", response_model=Page[CourseSummary])
def courses(
    level_term: list[str] = Query(default=[]),
    course_type: list[str] = Query(default=[]),
    credit: list[float] = Query(default=[]),
    min_weekly_class: str | None = None,
    max_weekly_class: str | None = None,
    min_section_count: str | None = None,
    max_section_count: str | None = None,
    min_ciw: str | None = None,
    max_ciw: str | None = None,
    min_cr: str | None = None,
    max_cr: str | None = None,
    min_cat: str | None = None,
    max_cat: str | None = None,
    min_students: str | None = None,
    max_students: str | None = None,
    search: str | None = Query(default=None, max_length=200),
    paging: PageParams = Depends(page_params()),
    scope: DashboardScope = Depends(get_dashboard_scope),
    db: Session = Depends(get_db),
) -> Page[CourseSummary]:
    semester_id = _require_semester(scope)
    snapshot = load_snapshot(db, semester_id)
    sections = dashboard_service.scope_sections(snapshot.sections, scope, snapshot.programs)
    filters = dashboard_service.course_filters(
        level_terms=level_term,
        course_types=course_type,
        credits=credit,
        weekly_class=(min_weekly_class, max_weekly_class),
        section_count=(min_section_count, max_section_count),
        ciw=(min_ciw, max_ciw),
        cr=(min_cr, max_cr),
        cat=(min_cat, max_cat),
        students=(min_students, max_students),
        search=search,
    )
    try:
        rows = apply_filters(
            dashboard_service.summarize_courses(sections, snapshot.ciw_counts, snapshot.cr_counts), filters
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return paginate(rows, paging.page, paging.page_size)


@router.get("/sections", response_model=Page[SectionRow])
def sections(
    level_term: list[str] = Query(default=[]),
    course_type: list[str] = Query(default=[]),
    credit: list[float] = Query(default=[]),
    min_class_taken: str | None = None,
    max_class_taken: str | None = None,
    min_students: str | None = None,
    max_students: str | None = None,
    search: str | None = Query(default=None, max_length=200),
    paging: PageParams = Depends(page_params()),
    scope: DashboardScope = Depends(get_dashboard_scope),
    db: Session = Depends(get_db),
) -> Page[SectionRow]:
    semester_id = _require_semester(scope)
    snapshot = load_snapshot(db, semester_id)
    scoped = dashboard_service.scope_sections(snapshot.sections, scope, snapshot.programs)
    rows = dashboard_service.section_rows(
        sorted(scoped, key=lambda section: (section.course_code, section.section)),
        snapshot.ciw_counts,
        snapshot.cr_counts,
    )
    filters = dashboard_service.section_filters(
        level_terms=level_term,
        course_types=course_type,
        credits=credit,
        class_taken=(min_class_taken, max_class_taken),
        students=(min_students, max_students),
        search=search,
    )
    try:
        filtered = apply_filters(rows, filters)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return paginate(filtered, paging.page, paging.page_size)


@router.get("/rooms/{room_id}/occupancy", response_model=RoomOccupancy)
def room_occupancy(room_id: str, db: Session = Depends(get_db)) -> RoomOccupancy:
    room = db.get(Room, room_id)
    if room is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    entry = RoomEntry.model_validate(room)
    routine = load_active_routine(db, entry.semester_id) if entry.semester_id else {}
    return room_occupancy_stats(entry, load_programs(db), routine, load_default_slots(db))
