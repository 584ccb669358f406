"""Merged-section forests.

``merged_with_section_id`` is a parent pointer: a merged section is taught
together with its parent and is displayed beneath it. The pointer is not
enforced by the database, so the forest builder breaks any cycle it finds and
reports it instead of following it.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from routinedesk.core.exceptions import DataIntegrityError, ResourceNotFoundError
from routinedesk.schemas.dashboard import (
    DisplayCourse,
    ForestTotals,
    MergeForest,
    MergeIntegrityIssue,
    TreeStats,
)
from routinedesk.schemas.section import EnrollmentEntry

logger = logging.getLogger(__name__)


def display_sort_key(section: EnrollmentEntry) -> tuple[str, str]:
    return section.course_code, section.section


def _find_cycles(parent_of: dict[str, str | None]) -> list[list[str]]:
    """Return every parent-pointer cycle, each listed in walk order."""
    state: dict[str, int] = {}  # 1 = on current path, 2 = finished
    cycles: list[list[str]] = []
    for start in parent_of:
        if state.get(start):
            continue
        path: list[str] = []
        current: str | None = start
        while current is not None and not state.get(current):
            state[current] = 1
            path.append(current)
            current = parent_of.get(current)
        if current is not None and state.get(current) == 1:
            cycles.append(path[path.index(current):])
        for section_id in path:
            state[section_id] = 2
    return cycles


def build_forest(sections: Iterable[EnrollmentEntry], *, strict: bool = False) -> MergeForest:
    """Group sections into merge trees.

    A section whose parent is outside ``sections`` becomes a root. Roots and
    every child list are sorted by course code, then section. When a cycle is
    found the edge leaving its smallest member is dropped so that member
    becomes a root, and the cycle is listed in ``integrity_errors``. With
    ``strict=True`` a cycle raises :class:`DataIntegrityError` instead.
    """
    lookup: dict[str, EnrollmentEntry] = {}
    for section in sections:
        lookup.setdefault(section.section_id, section)

    parent_of: dict[str, str | None] = {}
    for section_id, section in lookup.items():
        parent_id = section.merged_with_section_id
        parent_of[section_id] = parent_id if parent_id in lookup and parent_id != section_id else None

    issues: list[MergeIntegrityIssue] = []
    for cycle in _find_cycles(parent_of):
        if strict:
            raise DataIntegrityError(
                "Merged sections form a cycle",
                details={"cycle": cycle},
            )
        breaker = min(cycle, key=lambda section_id: (*display_sort_key(lookup[section_id]), section_id))
        logger.warning("Merge cycle %s; treating section %s as a root", " -> ".join(cycle), breaker)
        issues.append(
            MergeIntegrityIssue(
                sectionId=breaker,
                mergedWithSectionId=parent_of[breaker],
                cycle=cycle,
                message="Merged sections form a cycle",
            )
        )
        parent_of[breaker] = None

    children_of: dict[str, list[str]] = {section_id: [] for section_id in lookup}
    root_ids: list[str] = []
    for section_id, parent_id in parent_of.items():
        if parent_id is None:
            root_ids.append(section_id)
        else:
            children_of[parent_id].append(section_id)

    # Built bottom-up so merge chains of any length stay off the call stack.
    nodes: dict[str, DisplayCourse] = {}
    for section_id in reversed(_preorder(root_ids, children_of)):
        children = sorted((nodes[child_id] for child_id in children_of[section_id]), key=display_sort_key)
        nodes[section_id] = DisplayCourse(**lookup[section_id].model_dump(), children=children)

    roots = sorted((nodes[section_id] for section_id in root_ids), key=display_sort_key)
    return MergeForest(roots=roots, integrityErrors=issues)


def _preorder(root_ids: Iterable[str], children_of: Mapping[str, list[str]]) -> list[str]:
    order: list[str] = []
    stack = list(root_ids)
    while stack:
        section_id = stack.pop()
        order.append(section_id)
        stack.extend(children_of[section_id])
    return order


def get_tree_stats(
    node: DisplayCourse,
    ciw_counts: Mapping[str, int],
    cr_counts: Mapping[str, int],
) -> TreeStats:
    """Sum students, CIW, CR and CAT over ``node`` and all its descendants."""
    stats = TreeStats()
    visited: set[str] = set()
    stack = [node]
    while stack:
        current = stack.pop()
        if current.section_id in visited:
            raise DataIntegrityError(
                f"Section {current.section_id} appears twice in one merge tree",
                details={"section_id": current.section_id},
            )
        visited.add(current.section_id)
        stats.students += current.student_count
        stats.ciw += ciw_counts.get(current.section_id, 0)
        stats.cr += cr_counts.get(current.section_id, 0)
        stats.cat += current.class_taken
        stack.extend(current.children)
    return stats


def with_tree_stats(
    nodes: Sequence[DisplayCourse],
    ciw_counts: Mapping[str, int],
    cr_counts: Mapping[str, int],
) -> list[DisplayCourse]:
    """Copies of ``nodes`` with ``stats`` filled in at every level."""
    order: list[DisplayCourse] = []
    stack = list(nodes)
    while stack:
        node = stack.pop()
        order.append(node)
        stack.extend(node.children)

    copies: dict[int, DisplayCourse] = {}
    for node in reversed(order):
        children = [copies[id(child)] for child in node.children]
        stats = TreeStats(
            students=node.student_count,
            ciw=ciw_counts.get(node.section_id, 0),
            cr=cr_counts.get(node.section_id, 0),
            cat=node.class_taken,
        )
        for child in children:
            stats.students += child.stats.students
            stats.ciw += child.stats.ciw
            stats.cr += child.stats.cr
            stats.cat += child.stats.cat
        copies[id(node)] = node.model_copy(update={"stats": stats, "children": children})
    return [copies[id(node)] for node in nodes]


def forest_totals(
    roots: Sequence[DisplayCourse],
    ciw_counts: Mapping[str, int],
    cr_counts: Mapping[str, int],
) -> ForestTotals:
    # Only roots contribute credit; a merged child is taught under its parent.
    totals = ForestTotals()
    for root in roots:
        totals.credits += root.credit
        stats = get_tree_stats(root, ciw_counts, cr_counts)
        totals.students += stats.students
        totals.ciw += stats.ciw
        totals.cr += stats.cr
        totals.cat += stats.cat
    return totals


def validate_merge(sections: Sequence[EnrollmentEntry], source_id: str, target_id: str) -> None:
    by_id = {section.section_id: section for section in sections}
    if source_id not in by_id:
        raise ResourceNotFoundError("Section", source_id)
    if target_id not in by_id:
        raise ResourceNotFoundError("Section", target_id)
    if source_id == target_id:
        raise DataIntegrityError("A section cannot be merged with itself", details={"section_id": source_id})
    target = by_id[target_id]
    if target.merged_with_section_id:
        raise DataIntegrityError(
            f"Target section {target_id} is already merged into {target.merged_with_section_id}",
            details={"target_section_id": target_id},
        )
