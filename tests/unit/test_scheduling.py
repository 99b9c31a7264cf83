"""Tests for visit scheduling rules."""

from datetime import date

import pytest
from fastapi import HTTPException

from app.domain.visits.scheduling import (
    build_calendar_event,
    compute_visit_stats,
    has_time_conflict,
    time_to_minutes,
    validate_status_transition,
)
from app.models import Property, User
from app.models_visit import Visit


def _visit(status="pending", type="in-person", **kwargs):
    return Visit(status=status, type=type, **kwargs)


@pytest.mark.unit
def test_time_to_minutes():
    assert time_to_minutes("00:00") == 0
    assert time_to_minutes("10:30") == 630
    assert time_to_minutes("23:59") == 1439


@pytest.mark.unit
@pytest.mark.parametrize(
    "proposed,expected",
    [
        ("10:00", True),
        ("10:59", True),
        ("11:00", False),
        ("09:01", True),
        ("09:00", False),
        ("14:00", False),
    ],
)
def test_conflict_window_is_strictly_under_an_hour(proposed, expected):
    assert has_time_conflict(proposed, ["10:00"]) is expected


@pytest.mark.unit
def test_no_existing_visits_means_no_conflict():
    assert has_time_conflict("10:00", []) is False


@pytest.mark.unit
def test_conflict_does_not_wrap_around_midnight():
    assert has_time_conflict("23:30", ["00:10"]) is False


@pytest.mark.unit
def test_conflict_found_among_several_visits():
    assert has_time_conflict("15:20", ["09:00", "12:00", "16:00"]) is True
    assert has_time_conflict("14:00", ["09:00", "12:00", "16:00"]) is False


@pytest.mark.unit
@pytest.mark.parametrize(
    "current,new",
    [
        ("pending", "confirmed"),
        ("pending", "cancelled"),
        ("confirmed", "completed"),
        ("confirmed", "cancelled"),
        ("completed", "completed"),
        ("pending", "pending"),
    ],
)
def test_allowed_status_transitions(current, new):
    validate_status_transition(current, new)


@pytest.mark.unit
@pytest.mark.parametrize(
    "current,new",
    [
        ("pending", "completed"),
        ("confirmed", "pending"),
        ("completed", "pending"),
        ("completed", "cancelled"),
        ("cancelled", "confirmed"),
    ],
)
def test_rejected_status_transitions(current, new):
    with pytest.raises(HTTPException) as exc_info:
        validate_status_transition(current, new)
    assert exc_info.value.status_code == 400


@pytest.mark.unit
def test_unknown_status_is_rejected():
    with pytest.raises(HTTPException) as exc_info:
        validate_status_transition("pending", "archived")
    assert exc_info.value.status_code == 400


@pytest.mark.unit
def test_calendar_event_spans_one_hour():
    prop = Property(id="p1", title="Sea view flat", image="img.jpg", location="Malaga")
    client = User(id="c1", name="Ana", email="ana@example.com", phone=None)
    agent = User(id="a1", name="Laura", email="laura@example.com")
    visit = Visit(
        id="v1",
        date=date(2024, 1, 10),
        time="14:30",
        status="confirmed",
        type="video-call",
        notes="Bring documents",
        agent_id="a1",
    )
    visit.property = prop
    visit.client = client
    visit.agent = agent

    event = build_calendar_event(visit)

    assert event["title"] == "Sea view flat - Ana"
    assert event["start"] == "2024-01-10T14:30:00"
    assert event["end"] == "2024-01-10T15:30:00"
    assert event["property"] == {
        "id": "p1",
        "title": "Sea view flat",
        "image": "img.jpg",
        "location": "Malaga",
    }
    assert event["client"] == {"name": "Ana", "email": "ana@example.com", "phone": ""}
    assert event["agentName"] == "Laura"
    assert event["notes"] == "Bring documents"


@pytest.mark.unit
def test_calendar_event_late_visit_ends_next_day():
    visit = Visit(id="v2", date=date(2024, 1, 10), time="23:30", status="pending", type="in-person")
    visit.property = Property(id="p1", title="Loft", image=None, location="Seville")
    visit.client = User(id="c1", name="Ana", email="ana@example.com")

    event = build_calendar_event(visit)

    assert event["end"] == "2024-01-11T00:30:00"
    assert event["agentName"] is None


@pytest.mark.unit
def test_stats_counts_and_ratio():
    visits = (
        [_visit("pending") for _ in range(2)]
        + [_visit("confirmed", type="video-call")]
        + [_visit("completed") for _ in range(3)]
        + [_visit("cancelled", type="video-call")]
    )

    stats = compute_visit_stats(visits)

    assert stats["byStatus"] == {
        "pending": 2,
        "confirmed": 1,
        "completed": 3,
        "cancelled": 1,
        "total": 7,
    }
    assert stats["byType"] == {"in-person": 5, "video-call": 2}
    assert stats["conversion"]["ratio"] == "42.9"


@pytest.mark.unit
def test_stats_on_empty_set():
    stats = compute_visit_stats([])

    assert stats["byStatus"]["total"] == 0
    assert all(count == 0 for count in stats["byStatus"].values())
    assert stats["byType"] == {"in-person": 0, "video-call": 0}
    assert stats["conversion"]["ratio"] == "0"


@pytest.mark.unit
def test_stats_ratio_zero_without_completed_visits():
    stats = compute_visit_stats([_visit("pending"), _visit("cancelled")])
    assert stats["conversion"]["ratio"] == "0"


@pytest.mark.unit
def test_stats_all_completed():
    stats = compute_visit_stats([_visit("completed"), _visit("completed")])
    assert stats["conversion"]["ratio"] == "100.0"
