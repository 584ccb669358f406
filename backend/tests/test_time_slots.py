import pytest
from pydantic import ValidationError

from routinedesk.schemas.time_slot import TimeSlot, normalize_days
from routinedesk.services.time_slots import (
    canonical_slot_string,
    effective_room_slots,
    filter_slots_by_tab,
    format_time_to_ampm,
    same_slot,
    slot_to_string,
    sort_slots,
    unique_slots,
    weekday_name,
)


def slot(slot_type: str, start: str, end: str, slot_id: str | None = None) -> TimeSlot:
    data = {"type": slot_type, "startTime": start, "endTime": end}
    if slot_id:
        data["id"] = slot_id
    return TimeSlot(**data)


def test_format_time_to_ampm():
    assert format_time_to_ampm("08:30") == "08:30 AM"
    assert format_time_to_ampm("13:00") == "01:00 PM"
    assert format_time_to_ampm("00:15") == "12:15 AM"
    assert format_time_to_ampm("12:00") == "12:00 PM"
    assert format_time_to_ampm("") == "N/A"
    assert format_time_to_ampm("noon") == "Invalid Time"


def test_slot_to_string_uses_display_form():
    assert slot_to_string(slot("Theory", "08:30", "10:00")) == "08:30 AM - 10:00 AM"
    assert slot_to_string(slot("Lab", "13:00", "14:30")) == "01:00 PM - 02:30 PM"


def test_canonical_slot_string_accepts_both_forms():
    assert canonical_slot_string("08:30 - 10:00") == "08:30 AM - 10:00 AM"
    assert canonical_slot_string("8:30 am - 10:00 am") == "08:30 AM - 10:00 AM"
    assert canonical_slot_string("01:00 PM - 02:30 PM") == "01:00 PM - 02:30 PM"
    assert canonical_slot_string("  Room break  ") == "Room break"


def test_time_slot_validation():
    with pytest.raises(ValidationError):
        slot("Theory", "10:00", "08:30")
    with pytest.raises(ValidationError):
        slot("Theory", "8:30", "10:00")
    with pytest.raises(ValidationError):
        slot("Seminar", "08:30", "10:00")


def test_sort_puts_theory_before_lab_then_by_start():
    slots = [
        slot("Lab", "08:30", "10:00"),
        slot("Theory", "11:30", "13:00"),
        slot("Theory", "08:30", "10:00"),
        slot("Lab", "13:00", "14:30"),
    ]
    ordered = [(item.type.value, item.start_time) for item in sort_slots(slots)]
    assert ordered == [("Theory", "08:30"), ("Theory", "11:30"), ("Lab", "08:30"), ("Lab", "13:00")]


def test_slots_match_by_value_not_id():
    assert same_slot(slot("Theory", "08:30", "10:00", "a"), slot("Theory", "08:30", "10:00", "b"))
    assert not same_slot(slot("Theory", "08:30", "10:00"), slot("Lab", "08:30", "10:00"))


def test_unique_slots_keeps_first_per_display_string():
    first = slot("Theory", "08:30", "10:00", "first")
    duplicate = slot("Theory", "08:30", "10:00", "second")
    other = slot("Lab", "13:00", "14:30")
    result = unique_slots([first, duplicate, other])
    assert [item.id for item in result] == ["first", other.id]


def test_filter_by_tab():
    slots = [slot("Theory", "08:30", "10:00"), slot("Lab", "13:00", "14:30")]
    assert len(filter_slots_by_tab(slots, "All")) == 2
    assert [item.type.value for item in filter_slots_by_tab(slots, "Lab")] == ["Lab"]


def test_effective_room_slots_falls_back_to_defaults():
    defaults = [slot("Theory", "08:30", "10:00")]
    own = [slot("Lab", "13:00", "14:30")]
    assert effective_room_slots(own, defaults) == own
    assert effective_room_slots([], defaults) == defaults


def test_normalize_days_orders_by_academic_week():
    assert normalize_days(["Monday", "Saturday", " Sunday "]) == ["Saturday", "Sunday", "Monday"]
    with pytest.raises(ValueError):
        normalize_days(["Funday"])


def test_weekday_name():
    assert weekday_name("2024-01-01") == "Monday"
    assert weekday_name("2024-01-06") == "Saturday"
    assert weekday_name("not-a-date") is None
