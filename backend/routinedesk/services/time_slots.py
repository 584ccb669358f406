"""Time slot helpers shared by every routine computation.

A routine grid is keyed by the display form of a slot, ``"08:30 AM - 10:00 AM"``,
while slots themselves are stored with 24-hour ``HH:MM`` times. Two slots are the
same slot when type, start and end all match; slot ids are never compared.
"""
from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from datetime import date
from typing import Literal

from routinedesk.models.time_slot import SlotType
from routinedesk.schemas.time_slot import TIME_PATTERN, WEEK_DAYS, TimeSlotBase

SlotTab = Literal["All", "Theory", "Lab"]

SLOT_TYPE_ORDER = {SlotType.theory: 0, SlotType.lab: 1}
AMPM_PATTERN = re.compile(r"^(0?[1-9]|1[0-2]):([0-5]\d)\s*([AaPp][Mm])$")


def format_time_to_ampm(time24: str) -> str:
    if not time24:
        return "N/A"
    try:
        hours, minutes = time24.split(":")
        hour = int(hours)
        minute = int(minutes)
    except ValueError:
        return "Invalid Time"
    suffix = "PM" if hour >= 12 else "AM"
    hour = hour % 12 or 12
    return f"{hour:02d}:{minute:02d} {suffix}"


def slot_to_string(slot: TimeSlotBase) -> str:
    if not slot.start_time or not slot.end_time:
        return "Invalid Slot"
    return f"{format_time_to_ampm(slot.start_time)} - {format_time_to_ampm(slot.end_time)}"


def parse_clock(value: str) -> str | None:
    """Return a 24-hour ``HH:MM`` for either ``"13:00"`` or ``"01:00 PM"``."""
    value = value.strip()
    if TIME_PATTERN.match(value):
        return value
    match = AMPM_PATTERN.match(value)
    if match is None:
        return None
    hour = int(match.group(1)) % 12
    if match.group(3).upper() == "PM":
        hour += 12
    return f"{hour:02d}:{match.group(2)}"


def canonical_slot_string(value: str) -> str:
    """Normalize a routine key to the AM/PM display form.

    Keys that do not look like a time range are returned stripped but otherwise
    untouched so foreign data is never dropped.
    """
    parts = value.split("-")
    if len(parts) != 2:
        return value.strip()
    start, end = parse_clock(parts[0]), parse_clock(parts[1])
    if start is None or end is None:
        return value.strip()
    return f"{format_time_to_ampm(start)} - {format_time_to_ampm(end)}"


def slot_sort_key(slot: TimeSlotBase) -> tuple[int, str]:
    return SLOT_TYPE_ORDER.get(slot.type, len(SLOT_TYPE_ORDER)), slot.start_time


def sort_slots(slots: Iterable[TimeSlotBase]) -> list[TimeSlotBase]:
    return sorted(slots, key=slot_sort_key)


def slot_identity(slot: TimeSlotBase) -> tuple[str, str, str]:
    return SlotType(slot.type).value, slot.start_time, slot.end_time


def same_slot(first: TimeSlotBase, second: TimeSlotBase) -> bool:
    return slot_identity(first) == slot_identity(second)


def unique_slots(slots: Iterable[TimeSlotBase]) -> list[TimeSlotBase]:
    # First occurrence of each display string wins.
    seen: dict[str, TimeSlotBase] = {}
    for slot in slots:
        seen.setdefault(slot_to_string(slot), slot)
    return list(seen.values())


def filter_slots_by_tab(slots: Iterable[TimeSlotBase], tab: SlotTab | None) -> list[TimeSlotBase]:
    if tab is None or tab == "All":
        return list(slots)
    return [slot for slot in slots if SlotType(slot.type).value == tab]


def effective_room_slots(
    room_specific_slots: Sequence[TimeSlotBase],
    system_default_slots: Sequence[TimeSlotBase],
) -> Sequence[TimeSlotBase]:
    return room_specific_slots if room_specific_slots else system_default_slots


def order_days(days: Iterable[str]) -> list[str]:
    wanted = set(days)
    return [day for day in WEEK_DAYS if day in wanted]


def weekday_name(iso_date: str) -> str | None:
    try:
        parsed = date.fromisoformat(iso_date.strip())
    except (AttributeError, ValueError):
        return None
    # date.weekday(): Monday == 0
    return ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")[parsed.weekday()]
