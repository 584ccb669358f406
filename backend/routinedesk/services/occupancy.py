from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence

from routinedesk.models.time_slot import SlotType
from routinedesk.schemas.dashboard import OccupancyReport, RoomOccupancy, SlotOccupancy
from routinedesk.schemas.program import ProgramEntry
from routinedesk.schemas.room import RoomEntry
from routinedesk.schemas.routine import ClassDetail, FullRoutine, ScheduleOverrides
from routinedesk.schemas.time_slot import TimeSlot, TimeSlotBase
from routinedesk.services.time_slots import (
    SlotTab,
    effective_room_slots,
    filter_slots_by_tab,
    order_days,
    slot_identity,
    slot_to_string,
    sort_slots,
    unique_slots,
    weekday_name,
)

logger = logging.getLogger(__name__)


def occupancy_percentage(booked: int, total: int) -> float | None:
    if total <= 0:
        return None
    return round(booked / total * 100, 1)


def occupancy_label(booked: int, total: int) -> str:
    percentage = occupancy_percentage(booked, total)
    if percentage is None:
        return "N/A"
    return f"{percentage:.0f}% Full"


def slot_occupancy(booked: int, total: int) -> SlotOccupancy:
    return SlotOccupancy(booked=booked, total=total, percentage=occupancy_percentage(booked, total))


def resolve_header_slots(
    system_default_slots: Sequence[TimeSlotBase],
    tab: SlotTab = "All",
    *,
    program: ProgramEntry | None = None,
    programs_in_scope: Iterable[ProgramEntry] = (),
) -> list[TimeSlotBase]:
    """Pick the slot columns of the occupancy grid.

    With a single program the program's own slots are used, falling back to the
    system defaults when it has none for the active tab. Semester-wide, the
    defaults and every in-scope program's slots are merged by display string.
    """
    if program is not None:
        own_slots = filter_slots_by_tab(program.program_specific_slots, tab)
        if own_slots:
            return sort_slots(own_slots)
        return sort_slots(filter_slots_by_tab(system_default_slots, tab))

    candidates: list[TimeSlotBase] = list(system_default_slots)
    for scoped_program in programs_in_scope:
        candidates.extend(scoped_program.program_specific_slots)
    return sort_slots(unique_slots(filter_slots_by_tab(candidates, tab)))


def resolve_class(
    routine: FullRoutine,
    day: str,
    room_number: str,
    slot_string: str,
    *,
    on_date: str | None = None,
    overrides: ScheduleOverrides | None = None,
) -> ClassDetail | None:
    """Class occupying a cell, honoring a date-specific override for ``on_date``.

    An override stored as ``None`` frees the cell for that date.
    """
    if on_date and overrides and weekday_name(on_date) == day:
        by_date = overrides.get(room_number, {}).get(slot_string, {})
        if on_date in by_date:
            return by_date[on_date]
    return routine.get(day, {}).get(room_number, {}).get(slot_string)


def compute_occupancy(
    rooms: Sequence[RoomEntry],
    programs: Sequence[ProgramEntry],
    routine: FullRoutine,
    system_default_slots: Sequence[TimeSlotBase],
    tab: SlotTab = "All",
    *,
    scope_pids: Iterable[str] | None = None,
    selected_pid: str | None = None,
    on_date: str | None = None,
    overrides: ScheduleOverrides | None = None,
) -> OccupancyReport:
    """Booked versus total room-slots per day and slot column.

    ``programs`` is the full program list, used to resolve each room's assigned
    program. The in-scope program set is ``{selected_pid}`` when a single
    program is selected, else ``scope_pids`` (default: every program). A room
    counts toward a cell's total when its assigned program is active that day
    and the room offers the slot; it counts as booked when that cell holds a
    class of an in-scope program.
    """
    programs_by_pid = {program.p_id: program for program in programs}

    selected_program: ProgramEntry | None = None
    if selected_pid is not None:
        scope = {selected_pid}
        selected_program = programs_by_pid.get(selected_pid)
        header_slots = resolve_header_slots(system_default_slots, tab, program=selected_program)
        if selected_program is None:
            logger.debug("Selected program %s not found; using system default slots", selected_pid)
            days: list[str] = []
        else:
            days = order_days(selected_program.active_days)
    else:
        scope = set(scope_pids) if scope_pids is not None else set(programs_by_pid)
        programs_in_scope = [program for program in programs if program.p_id in scope]
        header_slots = resolve_header_slots(system_default_slots, tab, programs_in_scope=programs_in_scope)
        days = order_days(day for program in programs_in_scope for day in program.active_days)

    # Per room: the days it is open and the slots it offers.
    room_profiles: list[tuple[RoomEntry, set[str], set[tuple[str, str, str]]]] = []
    for room in rooms:
        assigned = programs_by_pid.get(room.assigned_to_pid) if room.assigned_to_pid else None
        if assigned is None or not assigned.active_days:
            logger.debug("Room %s has no active program days; it offers no slots", room.room_number)
            continue
        offered = {
            slot_identity(slot)
            for slot in effective_room_slots(room.room_specific_slots, system_default_slots)
        }
        room_profiles.append((room, set(assigned.active_days), offered))

    per_slot_counts: dict[str, dict[str, list[int]]] = {}
    day_counts: dict[str, list[int]] = {}
    column_counts: dict[str, list[int]] = defaultdict(lambda: [0, 0])
    grand = [0, 0]

    for day in days:
        day_cells: dict[str, list[int]] = {}
        day_total = [0, 0]
        for header_slot in header_slots:
            slot_string = slot_to_string(header_slot)
            identity = slot_identity(header_slot)
            booked = total = 0
            for room, active_days, offered in room_profiles:
                if day not in active_days or identity not in offered:
                    continue
                total += 1
                detail = resolve_class(
                    routine, day, room.room_number, slot_string, on_date=on_date, overrides=overrides
                )
                if detail is not None and detail.p_id in scope:
                    booked += 1
            day_cells[slot_string] = [booked, total]
            day_total[0] += booked
            day_total[1] += total
            column_counts[slot_string][0] += booked
            column_counts[slot_string][1] += total
        per_slot_counts[day] = day_cells
        day_counts[day] = day_total
        grand[0] += day_total[0]
        grand[1] += day_total[1]

    return OccupancyReport(
        days=days,
        headerSlots=[TimeSlot.model_validate(slot, from_attributes=True) for slot in header_slots],
        perSlot={
            day: {slot_string: slot_occupancy(*counts) for slot_string, counts in cells.items()}
            for day, cells in per_slot_counts.items()
        },
        perDay={day: slot_occupancy(*counts) for day, counts in day_counts.items()},
        perColumn={
            slot_to_string(slot): slot_occupancy(*column_counts[slot_to_string(slot)])
            for slot in header_slots
        },
        grandTotal=slot_occupancy(*grand),
    )


def room_occupancy_stats(
    room: RoomEntry,
    programs: Sequence[ProgramEntry],
    routine: FullRoutine,
    system_default_slots: Sequence[TimeSlotBase],
) -> RoomOccupancy:
    """Theory and lab usage of one room over its assigned program's active days."""
    program = next((item for item in programs if item.p_id == room.assigned_to_pid), None)
    if program is None or not program.active_days:
        return RoomOccupancy(roomNumber=room.room_number, theory=slot_occupancy(0, 0), lab=slot_occupancy(0, 0))

    applicable = effective_room_slots(room.room_specific_slots, system_default_slots)
    by_string = {slot_to_string(slot): slot for slot in applicable}
    active_days = program.active_days

    totals = {SlotType.theory: 0, SlotType.lab: 0}
    booked = {SlotType.theory: 0, SlotType.lab: 0}
    for slot in applicable:
        totals[SlotType(slot.type)] += len(active_days)

    for day in active_days:
        cells = routine.get(day, {}).get(room.room_number, {})
        for slot_string, detail in cells.items():
            matched = by_string.get(slot_string)
            if detail is not None and matched is not None:
                booked[SlotType(matched.type)] += 1

    return RoomOccupancy(
        roomNumber=room.room_number,
        theory=slot_occupancy(booked[SlotType.theory], totals[SlotType.theory]),
        lab=slot_occupancy(booked[SlotType.lab], totals[SlotType.lab]),
    )
