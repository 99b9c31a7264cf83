"""Tests for weekly availability templates and slot validation."""

import pytest
from pydantic import ValidationError

from app.domain.availability.schemas import WeekAvailability
from app.domain.availability.week import (
    DEFAULT_WEEK_AVAILABILITY,
    WEEKDAYS,
    default_week_availability,
    find_slot_problems,
)


def _slot(start, end, slot_id=None):
    return {"id": slot_id, "startTime": start, "endTime": end}


@pytest.mark.unit
def test_default_template_shape():
    week = default_week_availability()

    assert list(week) == list(WEEKDAYS)
    for day in ("monday", "tuesday", "wednesday", "thursday", "friday"):
        assert week[day]["enabled"] is True
        assert week[day]["timeSlots"][0]["startTime"] == "09:00"
        assert week[day]["timeSlots"][0]["endTime"] == "18:00"
    assert week["saturday"]["timeSlots"][0]["startTime"] == "10:00"
    assert week["saturday"]["timeSlots"][0]["endTime"] == "14:00"
    assert week["sunday"] == {"enabled": False, "timeSlots": []}


@pytest.mark.unit
def test_default_template_copies_are_independent():
    week = default_week_availability()
    week["monday"]["timeSlots"].clear()

    assert DEFAULT_WEEK_AVAILABILITY["monday"]["timeSlots"]
    assert default_week_availability()["monday"]["timeSlots"]


@pytest.mark.unit
def test_valid_slots_have_no_problems():
    slots = [_slot("09:00", "12:00"), _slot("12:00", "14:00"), _slot("16:00", "18:00")]
    assert find_slot_problems("monday", slots) == []


@pytest.mark.unit
def test_slot_must_end_after_it_starts():
    problems = find_slot_problems("monday", [_slot("12:00", "09:00")])
    assert len(problems) == 1
    assert "must end after it starts" in problems[0]

    assert find_slot_problems("monday", [_slot("10:00", "10:00")])


@pytest.mark.unit
def test_overlapping_slots_are_reported_regardless_of_order():
    problems = find_slot_problems("friday", [_slot("11:00", "13:00"), _slot("09:00", "12:00")])
    assert len(problems) == 1
    assert "overlaps" in problems[0]
    assert problems[0].startswith("friday")


def _week_payload(**days):
    week = default_week_availability()
    week.update(days)
    return week


@pytest.mark.unit
def test_week_schema_accepts_default_template():
    week = WeekAvailability(**_week_payload())
    assert week.sunday.enabled is False


@pytest.mark.unit
def test_week_schema_rejects_inverted_slot():
    payload = _week_payload(
        tuesday={"enabled": True, "timeSlots": [_slot("18:00", "09:00", "tue-1")]}
    )
    with pytest.raises(ValidationError):
        WeekAvailability(**payload)


@pytest.mark.unit
def test_week_schema_rejects_bad_time_format():
    payload = _week_payload(
        tuesday={"enabled": True, "timeSlots": [_slot("9am", "18:00", "tue-1")]}
    )
    with pytest.raises(ValidationError):
        WeekAvailability(**payload)


@pytest.mark.unit
def test_week_schema_assigns_missing_slot_ids_and_pads_times():
    payload = _week_payload(
        sunday={"enabled": True, "timeSlots": [_slot("9:00", "11:00"), _slot("12:00", "13:00")]}
    )
    week = WeekAvailability(**payload)

    assert [slot.id for slot in week.sunday.timeSlots] == ["sun-1", "sun-2"]
    assert week.sunday.timeSlots[0].startTime == "09:00"


@pytest.mark.unit
def test_week_schema_requires_every_day():
    payload = default_week_availability()
    del payload["sunday"]
    with pytest.raises(ValidationError):
        WeekAvailability(**payload)
