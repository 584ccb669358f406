import pytest

from routinedesk.models.section import CourseType
from routinedesk.schemas.section import EnrollmentEntry
from routinedesk.services.dashboard import (
    course_filters,
    full_course_type,
    section_filters,
    section_rows,
    summarize_courses,
    summarize_teachers,
    teacher_filters,
)
from routinedesk.services.filtering import (
    DateRangeFilter,
    MultiSelectFilter,
    RangeFilter,
    SearchFilter,
    apply_filters,
    paginate,
)


def section(
    section_id: str,
    teacher_id: str,
    teacher_name: str,
    designation: str,
    credit: float,
    *,
    p_id: str = "15",
    course_code: str = "CSE111",
    label: str = "A",
    course_type: CourseType = CourseType.theory,
    students: int = 30,
) -> EnrollmentEntry:
    return EnrollmentEntry(
        section_id=section_id,
        semester="Spring 2025",
        p_id=p_id,
        course_code=course_code,
        course_title=f"Course {course_code}",
        section=label,
        credit=credit,
        type="Core",
        level_term="L1T1",
        course_type=course_type,
        student_count=students,
        teacher_id=teacher_id,
        teacher_name=teacher_name,
        designation=designation,
    )


SECTIONS = [
    section("s1", "T1", "Anis", "Lecturer", 3.0),
    section("s2", "T1", "Anis", "Lecturer", 3.0, course_code="CSE121"),
    section("s3", "T2", "Hasan", "Professor", 12.0, p_id="19", course_code="EEE101"),
    section("s4", "T3", "Papon", "Assistant Professor", 2.0, course_code="CSE111L", course_type=CourseType.lab),
]


def test_multi_select_is_or_within_and_across_filters():
    teachers = summarize_teachers(SECTIONS)
    filters = teacher_filters(designations=["Lecturer", "Professor"], min_credit="5", max_credit="15")

    result = apply_filters(teachers, filters)

    # Anis carries 6 credits across two sections; Hasan carries 12.
    assert [teacher.employee_id for teacher in result] == ["T1", "T2"]


def test_credit_range_excludes_out_of_bounds():
    teachers = summarize_teachers(SECTIONS)
    result = apply_filters(teachers, teacher_filters(min_credit=3, max_credit=10))
    assert [teacher.employee_id for teacher in result] == ["T1"]


def test_blank_bounds_filter_nothing():
    teachers = summarize_teachers(SECTIONS)
    assert len(apply_filters(teachers, teacher_filters(min_credit="", max_credit=""))) == 3


def test_unparseable_bound_raises_value_error():
    teachers = summarize_teachers(SECTIONS)
    with pytest.raises(ValueError):
        apply_filters(teachers, teacher_filters(min_credit="lots"))


@pytest.mark.parametrize("bound", ["nan", "inf", "-Infinity"])
def test_non_finite_bound_raises_value_error(bound):
    teachers = summarize_teachers(SECTIONS)
    with pytest.raises(ValueError):
        apply_filters(teachers, teacher_filters(max_credit=bound))


def test_program_filter_matches_any_course():
    teachers = summarize_teachers(SECTIONS)
    result = apply_filters(teachers, teacher_filters(program_pids=["19"]))
    assert [teacher.teacher_name for teacher in result] == ["Hasan"]


def test_teacher_search_covers_courses():
    teachers = summarize_teachers(SECTIONS)
    assert [t.employee_id for t in apply_filters(teachers, teacher_filters(search="cse121"))] == ["T1"]
    assert [t.employee_id for t in apply_filters(teachers, teacher_filters(search="  "))] == ["T1", "T2", "T3"]


def test_summaries_sort_by_name_and_sum_credit_load():
    teachers = summarize_teachers(SECTIONS)
    assert [teacher.teacher_name for teacher in teachers] == ["Anis", "Hasan", "Papon"]
    assert teachers[0].credit_load == 6.0


def test_course_summary_groups_by_program_and_code():
    sections = SECTIONS + [section("s5", "T2", "Hasan", "Professor", 3.0, label="B", students=25)]
    courses = summarize_courses(sections, {"s1": 2, "s5": 1}, {"s1": 20})

    cse111 = next(course for course in courses if course.course_code == "CSE111")
    assert cse111.section_count == 2
    assert cse111.total_students == 55
    assert cse111.total_ciw == 3
    assert cse111.total_cr == 20
    assert [(course.p_id, course.course_code) for course in courses] == [
        ("15", "CSE111"),
        ("15", "CSE111L"),
        ("15", "CSE121"),
        ("19", "EEE101"),
    ]


def test_course_filters_by_type_and_section_count():
    sections = SECTIONS + [section("s5", "T2", "Hasan", "Professor", 3.0, label="B")]
    courses = summarize_courses(sections, {}, {})

    labs = apply_filters(courses, course_filters(course_types=["Lab (Core)"]))
    assert [course.course_code for course in labs] == ["CSE111L"]

    multi = apply_filters(courses, course_filters(section_count=(2, None)))
    assert [course.course_code for course in multi] == ["CSE111"]


def test_section_filters_search_and_student_range():
    rows = section_rows(SECTIONS, {"s1": 2}, {})
    assert rows[0].ciw == 2

    by_teacher = apply_filters(rows, section_filters(search="papon"))
    assert [row.section_id for row in by_teacher] == ["s4"]

    nobody = apply_filters(rows, section_filters(students=(31, "")))
    assert nobody == []


def test_full_course_type():
    assert full_course_type(SECTIONS[0]) == "Theory (Core)"
    generic = section("s9", "T9", "X", "Lecturer", 0.0, course_type=CourseType.others)
    assert full_course_type(generic) == "Core"


def test_range_filter_rejects_missing_value_when_bounded():
    items = [{"weekly": None}, {"weekly": 2}]
    bounded = RangeFilter(lambda item: item["weekly"], 1, None)
    assert [item["weekly"] for item in items if bounded.matches(item)] == [2]
    assert all(RangeFilter(lambda item: item["weekly"]).matches(item) for item in items)


def test_empty_selection_and_empty_search_match_everything():
    assert MultiSelectFilter(lambda item: item, ()).matches("anything")
    assert SearchFilter(None, (lambda item: item,)).matches("anything")
    assert not SearchFilter("zzz", (lambda item: item,)).matches("anything")


def test_paginate_clamps_page_and_reports_totals():
    items = list(range(45))

    page = paginate(items, page=3, page_size=20)
    assert page.items == list(range(40, 45))
    assert (page.page, page.total_items, page.total_pages) == (3, 45, 3)

    beyond = paginate(items, page=10, page_size=20)
    assert beyond.page == 3

    empty = paginate([], page=2, page_size=20)
    assert (empty.items, empty.page, empty.total_pages) == ([], 1, 1)


def test_date_range_filter_is_inclusive_and_skips_missing_dates():
    in_january = DateRangeFilter(lambda item: item, "2025-01-01", "2025-01-31")
    assert in_january.matches("2025-01-01")
    assert in_january.matches("2025-01-31")
    assert not in_january.matches("2025-02-01")
    assert not in_january.matches(None)
    assert DateRangeFilter(lambda item: item, "", None).matches(None)

    with pytest.raises(ValueError):
        DateRangeFilter(lambda item: item, "01/01/2025").matches("2025-01-05")
