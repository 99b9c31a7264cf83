"""Weekly availability template helpers"""

import copy

from ..visits.scheduling import time_to_minutes

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

# Template returned for agents that never saved a schedule
DEFAULT_WEEK_AVAILABILITY = {
    "monday": {"enabled": True, "timeSlots": [{"id": "mon-1", "startTime": "09:00", "endTime": "18:00"}]},
    "tuesday": {"enabled": True, "timeSlots": [{"id": "tue-1", "startTime": "09:00", "endTime": "18:00"}]},
    "wednesday": {"enabled": True, "timeSlots": [{"id": "wed-1", "startTime": "09:00", "endTime": "18:00"}]},
    "thursday": {"enabled": True, "timeSlots": [{"id": "thu-1", "startTime": "09:00", "endTime": "18:00"}]},
    "friday": {"enabled": True, "timeSlots": [{"id": "fri-1", "startTime": "09:00", "endTime": "18:00"}]},
    "saturday": {"enabled": True, "timeSlots": [{"id": "sat-1", "startTime": "10:00", "endTime": "14:00"}]},
    "sunday": {"enabled": False, "timeSlots": []},
}


def default_week_availability() -> dict:
    """Fresh copy of the default template, safe for callers to mutate"""
    return copy.deepcopy(DEFAULT_WEEK_AVAILABILITY)


def find_slot_problems(day: str, slots: list[dict]) -> list[str]:
    """
    Describe every invalid slot in one day's schedule.

    A slot must end after it starts and slots may not overlap; a slot may start
    exactly when the previous one ends.
    """
    problems = []
    valid = []

    for slot in slots:
        start = time_to_minutes(slot["startTime"])
        end = time_to_minutes(slot["endTime"])
        if start >= end:
            problems.append(
                f"{day}: slot {slot['startTime']}-{slot['endTime']} must end after it starts"
            )
        else:
            valid.append((start, end, slot))

    valid.sort(key=lambda item: item[0])
    for (_, prev_end, prev), (start, _, slot) in zip(valid, valid[1:]):
        if start < prev_end:
            problems.append(
                f"{day}: slot {slot['startTime']}-{slot['endTime']} overlaps "
                f"{prev['startTime']}-{prev['endTime']}"
            )

    return problems
