"""Dashboard read models built from semester snapshots.

Everything here is a pure function of its arguments; the API layer loads the
snapshot and hands it in.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from routinedesk.models.section import CourseType
from routinedesk.schemas.dashboard import (
    CourseSummary,
    DashboardSummary,
    SectionRow,
    SectionStats,
    TeacherCourseSheet,
    TeacherSummary,
)
from routinedesk.schemas.program import ProgramEntry
from routinedesk.schemas.room import RoomEntry
from routinedesk.schemas.routine import FullRoutine
from routinedesk.schemas.section import EnrollmentEntry
from routinedesk.schemas.time_slot import TimeSlotBase
from routinedesk.services.filtering import Bound, Filter, MultiSelectFilter, RangeFilter, SearchFilter
from routinedesk.services.section_merge import build_forest, forest_totals, with_tree_stats
from routinedesk.services.time_slots import SlotTab, effective_room_slots, filter_slots_by_tab, slot_to_string


@dataclass(frozen=True)
class DashboardScope:
    semester_id: str | None = None
    selected_pid: str | None = None
    # None means every program is accessible.
    accessible_pids: frozenset[str] | None = None
    tab: SlotTab = "All"

    def program_pids(self, programs: Iterable[ProgramEntry]) -> set[str]:
        if self.selected_pid:
            return {self.selected_pid}
        if self.accessible_pids is not None:
            return set(self.accessible_pids)
        return {program.p_id for program in programs}


def scope_sections(
    sections: Iterable[EnrollmentEntry],
    scope: DashboardScope,
    programs: Sequence[ProgramEntry],
) -> list[EnrollmentEntry]:
    pids = scope.program_pids(programs)
    return [
        section
        for section in sections
        if (scope.semester_id is None or section.semester == scope.semester_id)
        and section.p_id in pids
        and (scope.tab == "All" or section.course_type == CourseType(scope.tab))
    ]


def scope_rooms(
    rooms: Iterable[RoomEntry],
    scope: DashboardScope,
    programs: Sequence[ProgramEntry],
    room_type_names: Mapping[str, str],
    configured_semesters: Iterable[str] = (),
) -> list[RoomEntry]:
    """Rooms of the semester (or of any configured semester) used by in-scope programs.

    ``room_type_names`` maps room type id to type name; with a Theory or Lab tab
    only rooms of the same-named type remain.
    """
    pids = scope.program_pids(programs)
    semesters = set(configured_semesters)
    selected: list[RoomEntry] = []
    for room in rooms:
        if scope.semester_id is not None:
            if room.semester_id != scope.semester_id:
                continue
        elif room.semester_id not in semesters:
            continue
        if room.assigned_to_pid not in pids and not pids.intersection(room.shared_with_pids):
            continue
        if scope.tab != "All" and room_type_names.get(room.type_id) != scope.tab:
            continue
        selected.append(room)
    return selected


def dedupe_rooms(rooms: Iterable[RoomEntry]) -> list[RoomEntry]:
    unique: dict[tuple[str, str], RoomEntry] = {}
    for room in rooms:
        unique.setdefault((room.building_id, room.room_number), room)
    return list(unique.values())


def dashboard_summary(
    sections: Sequence[EnrollmentEntry],
    rooms: Sequence[RoomEntry],
    programs: Sequence[ProgramEntry],
    routines_by_semester: Mapping[str, FullRoutine],
    system_default_slots: Sequence[TimeSlotBase],
    scope: DashboardScope,
    ciw_counts: Mapping[str, int],
    room_type_names: Mapping[str, str],
    configured_semesters: Iterable[str] = (),
) -> DashboardSummary:
    relevant_sections = scope_sections(sections, scope, programs)
    relevant_rooms = scope_rooms(rooms, scope, programs, room_type_names, configured_semesters)
    programs_by_pid = {program.p_id: program for program in programs}
    pids = scope.program_pids(programs)

    total_slots = 0
    booked_slots = 0
    for room in relevant_rooms:
        program = programs_by_pid.get(room.assigned_to_pid) if room.assigned_to_pid else None
        active_days = program.active_days if program is not None else []
        if not active_days:
            continue
        slots = filter_slots_by_tab(effective_room_slots(room.room_specific_slots, system_default_slots), scope.tab)
        total_slots += len(active_days) * len(slots)

        routine = routines_by_semester.get(room.semester_id or "", {})
        for day in active_days:
            cells = routine.get(day, {}).get(room.room_number, {})
            for slot in slots:
                detail = cells.get(slot_to_string(slot))
                # Classes of programs outside the scope leave the slot unbooked.
                if detail is not None and detail.p_id in pids:
                    booked_slots += 1

    return DashboardSummary(
        teacherCount=len({section.teacher_id for section in relevant_sections}),
        uniqueCourseCount=len({section.course_code for section in relevant_sections}),
        sectionCount=len(relevant_sections),
        slotRequirement=sum(section.weekly_class or 0 for section in relevant_sections),
        bookedSlotRequirement=sum(ciw_counts.get(section.section_id, 0) for section in relevant_sections),
        roomCount=len(dedupe_rooms(relevant_rooms)),
        totalSlots=total_slots,
        bookedSlots=booked_slots,
    )


def section_stats(
    sections: Iterable[EnrollmentEntry],
    ciw_counts: Mapping[str, int],
    cr_counts: Mapping[str, int],
) -> list[SectionStats]:
    return [
        SectionStats(
            sectionId=section.section_id,
            ciw=ciw_counts.get(section.section_id, 0),
            cr=cr_counts.get(section.section_id, 0),
            cat=section.class_taken,
        )
        for section in sections
    ]


def full_course_type(section: EnrollmentEntry) -> str:
    """Display label such as ``"Theory (Core)"``; plain category when delivery type is generic."""
    if section.course_type in (CourseType.others, CourseType.not_applicable):
        return section.type
    return f"{CourseType(section.course_type).value} ({section.type})"


# --- Teachers ---

def summarize_teachers(sections: Iterable[EnrollmentEntry]) -> list[TeacherSummary]:
    by_teacher: dict[str, list[EnrollmentEntry]] = {}
    for section in sections:
        by_teacher.setdefault(section.teacher_id, []).append(section)

    teachers = []
    for teacher_id, courses in by_teacher.items():
        info = courses[0]
        teachers.append(
            TeacherSummary(
                employeeId=teacher_id,
                teacherName=info.teacher_name,
                designation=info.designation,
                mobile=info.teacher_mobile,
                email=info.teacher_email,
                creditLoad=sum(course.credit for course in courses),
                courses=courses,
            )
        )
    return sorted(teachers, key=lambda teacher: (teacher.teacher_name.lower(), teacher.employee_id))


def teacher_filters(
    *,
    designations: Sequence[str] = (),
    program_pids: Sequence[str] = (),
    min_credit: Bound = None,
    max_credit: Bound = None,
    search: str | None = None,
) -> list[Filter[TeacherSummary]]:
    return [
        MultiSelectFilter(lambda teacher: teacher.designation, designations),
        MultiSelectFilter(lambda teacher: [course.p_id for course in teacher.courses], program_pids),
        RangeFilter(lambda teacher: teacher.credit_load, min_credit, max_credit),
        SearchFilter(
            search,
            (
                lambda teacher: teacher.employee_id,
                lambda teacher: teacher.teacher_name,
                lambda teacher: teacher.designation,
                lambda teacher: teacher.mobile,
                lambda teacher: teacher.email,
                lambda teacher: [course.course_code for course in teacher.courses],
                lambda teacher: [course.course_title for course in teacher.courses],
                lambda teacher: [course.section for course in teacher.courses],
            ),
        ),
    ]


# --- Courses ---

def summarize_courses(
    sections: Iterable[EnrollmentEntry],
    ciw_counts: Mapping[str, int],
    cr_counts: Mapping[str, int],
) -> list[CourseSummary]:
    grouped: dict[tuple[str, str], list[EnrollmentEntry]] = {}
    for section in sections:
        grouped.setdefault((section.p_id, section.course_code), []).append(section)

    courses = []
    for (p_id, course_code), members in grouped.items():
        first = members[0]
        courses.append(
            CourseSummary(
                pId=p_id,
                courseCode=course_code,
                courseTitle=first.course_title,
                credit=first.credit,
                type=first.type,
                levelTerm=first.level_term,
                weeklyClass=first.weekly_class,
                sectionCount=len(members),
                totalStudents=sum(member.student_count for member in members),
                totalCiw=sum(ciw_counts.get(member.section_id, 0) for member in members),
                totalCr=sum(cr_counts.get(member.section_id, 0) for member in members),
                totalCat=sum(member.class_taken for member in members),
                sections=members,
            )
        )
    return sorted(courses, key=lambda course: (course.p_id, course.course_code))


def course_filters(
    *,
    level_terms: Sequence[str] = (),
    course_types: Sequence[str] = (),
    credits: Sequence[float] = (),
    weekly_class: tuple[Bound, Bound] = (None, None),
    section_count: tuple[Bound, Bound] = (None, None),
    ciw: tuple[Bound, Bound] = (None, None),
    cr: tuple[Bound, Bound] = (None, None),
    cat: tuple[Bound, Bound] = (None, None),
    students: tuple[Bound, Bound] = (None, None),
    search: str | None = None,
) -> list[Filter[CourseSummary]]:
    return [
        MultiSelectFilter(lambda course: course.level_term, level_terms),
        MultiSelectFilter(lambda course: [full_course_type(section) for section in course.sections], course_types),
        MultiSelectFilter(lambda course: course.credit, credits),
        RangeFilter(lambda course: course.weekly_class, *weekly_class),
        RangeFilter(lambda course: course.section_count, *section_count),
        RangeFilter(lambda course: course.total_ciw, *ciw),
        RangeFilter(lambda course: course.total_cr, *cr),
        RangeFilter(lambda course: course.total_cat, *cat),
        RangeFilter(lambda course: course.total_students, *students),
        SearchFilter(search, (lambda course: course.course_code, lambda course: course.course_title)),
    ]


# --- Sections ---

def section_rows(
    sections: Iterable[EnrollmentEntry],
    ciw_counts: Mapping[str, int],
    cr_counts: Mapping[str, int],
) -> list[SectionRow]:
    return [
        SectionRow(
            **section.model_dump(),
            ciw=ciw_counts.get(section.section_id, 0),
            cr=cr_counts.get(section.section_id, 0),
        )
        for section in sections
    ]


def section_filters(
    *,
    level_terms: Sequence[str] = (),
    course_types: Sequence[str] = (),
    credits: Sequence[float] = (),
    class_taken: tuple[Bound, Bound] = (None, None),
    students: tuple[Bound, Bound] = (None, None),
    search: str | None = None,
) -> list[Filter[SectionRow]]:
    return [
        MultiSelectFilter(lambda row: row.level_term, level_terms),
        MultiSelectFilter(full_course_type, course_types),
        MultiSelectFilter(lambda row: row.credit, credits),
        RangeFilter(lambda row: row.class_taken, *class_taken),
        RangeFilter(lambda row: row.student_count, *students),
        SearchFilter(
            search,
            (
                lambda row: row.p_id,
                lambda row: row.course_code,
                lambda row: row.course_title,
                lambda row: row.section,
                lambda row: row.teacher_name,
            ),
        ),
    ]


def teacher_course_sheet(
    teacher_id: str,
    semester_id: str,
    sections: Iterable[EnrollmentEntry],
    ciw_counts: Mapping[str, int],
    cr_counts: Mapping[str, int],
) -> TeacherCourseSheet:
    own_sections = [
        section for section in sections if section.teacher_id == teacher_id and section.semester == semester_id
    ]
    forest = build_forest(own_sections)
    return TeacherCourseSheet(
        teacherId=teacher_id,
        semester=semester_id,
        courses=with_tree_stats(forest.roots, ciw_counts, cr_counts),
        totals=forest_totals(forest.roots, ciw_counts, cr_counts),
        integrityErrors=forest.integrity_errors,
    )
