"""
Visit scheduling rules

Pure functions with no database access:
- conflict window between visits on the same property and day
- status workflow
- calendar event shaping
- dashboard statistics
"""

from datetime import datetime, timedelta
from typing import Iterable

from fastapi import HTTPException

from ...models_visit import VISIT_STATUSES, VISIT_TYPES, Visit

# Minimum spacing between two active visits of the same property
CONFLICT_WINDOW_MINUTES = 60
VISIT_DURATION = timedelta(hours=1)

ALLOWED_TRANSITIONS = {
    "pending": {"confirmed", "cancelled"},
    "confirmed": {"completed", "cancelled"},
    "completed": set(),
    "cancelled": set(),
}

INITIAL_STATUSES = ("pending", "confirmed")


def time_to_minutes(value: str) -> int:
    """Minutes since midnight for an HH:MM string"""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def has_time_conflict(proposed_time: str, existing_times: Iterable[str]) -> bool:
    """
    True when any existing time starts less than CONFLICT_WINDOW_MINUTES away.

    Differences are taken within the day (no wrap-around at midnight) and a gap
    of exactly the window is allowed.
    """
    proposed = time_to_minutes(proposed_time)
    return any(
        abs(proposed - time_to_minutes(existing)) < CONFLICT_WINDOW_MINUTES
        for existing in existing_times
    )


def validate_status_transition(current: str, new: str) -> None:
    """Raise 400 unless the visit may move from `current` to `new`"""
    if new not in VISIT_STATUSES:
        raise HTTPException(status_code=400, detail=f"Invalid visit status: {new}")
    if current == new:
        return
    if new not in ALLOWED_TRANSITIONS.get(current, set()):
        raise HTTPException(
            status_code=400,
            detail=f"Cannot change visit status from '{current}' to '{new}'",
        )


def build_calendar_event(visit: Visit) -> dict:
    hours, minutes = (int(part) for part in visit.time.split(":"))
    start = datetime.combine(visit.date, datetime.min.time()).replace(hour=hours, minute=minutes)
    end = start + VISIT_DURATION

    prop = visit.property
    client = visit.client
    return {
        "id": visit.id,
        "title": f"{prop.title} - {client.name}",
        "start": start.isoformat(),
        "end": end.isoformat(),
        "status": visit.status,
        "type": visit.type,
        "property": {
            "id": prop.id,
            "title": prop.title,
            "image": prop.image,
            "location": prop.location,
        },
        "client": {
            "name": client.name,
            "email": client.email,
            "phone": client.phone or "",
        },
        "notes": visit.notes,
        "agentId": visit.agent_id,
        "agentName": visit.agent.name if visit.agent else None,
    }


def compute_visit_stats(visits: Iterable[Visit]) -> dict:
    by_status = {status: 0 for status in ("pending", "confirmed", "completed", "cancelled")}
    by_type = {visit_type: 0 for visit_type in VISIT_TYPES}
    total = 0

    for visit in visits:
        total += 1
        if visit.status in by_status:
            by_status[visit.status] += 1
        if visit.type in by_type:
            by_type[visit.type] += 1

    completed = by_status["completed"]
    ratio = f"{completed / total * 100:.1f}" if completed > 0 else "0"

    return {
        "byStatus": {**by_status, "total": total},
        "byType": by_type,
        "conversion": {"ratio": ratio},
    }
