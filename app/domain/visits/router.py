"""Visit router - FastAPI endpoints for visit scheduling"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_permission
from ...database import get_db
from ...models import User
from ...shared.responses import format_api_response, format_api_success
from ...shared.validators import parse_date_param, validate_time
from .schemas import ConflictCheckResponse, VisitCreate, VisitUpdate
from .service import VisitService, visit_to_dict

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/visits", tags=["Visits"])


def get_visit_service(db: Session = Depends(get_db)) -> VisitService:
    """Dependency injection for VisitService"""
    return VisitService(db)


# ============================================================================
# COLLECTION ROUTES
# ============================================================================


@router.get("")
async def get_visits(
    property_id: Optional[str] = Query(None, alias="propertyId"),
    status: Optional[str] = Query(None, description="Comma separated statuses"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    include_properties: bool = Query(False, alias="includeProperties"),
    limit: Optional[int] = Query(None, ge=1),
    page: int = Query(1, ge=1),
    current_user: User = Depends(require_permission("manage:visits")),
    service: VisitService = Depends(get_visit_service),
):
    """List visits, paginated when a limit is given"""
    visits = service.get_visits(
        property_id=property_id,
        status=status,
        start_date=parse_date_param(start_date, "startDate"),
        end_date=parse_date_param(end_date, "endDate"),
        include_properties=include_properties,
        limit=limit,
        page=page,
    )
    return format_api_response(visits)


@router.post("")
async def create_visit(
    data: VisitCreate,
    current_user: User = Depends(get_current_user),
    service: VisitService = Depends(get_visit_service),
):
    """Book a visit"""
    visit = service.create_visit(data, current_user)
    return format_api_response(visit_to_dict(visit), status_code=201)


@router.get("/by-date")
async def get_visits_by_date(
    start_date: str = Query(..., alias="startDate"),
    end_date: str = Query(..., alias="endDate"),
    agent_id: Optional[str] = Query(None, alias="agentId"),
    status: Optional[str] = Query(None),
    type: Optional[str] = Query(None),
    current_user: User = Depends(require_permission("manage:visits")),
    service: VisitService = Depends(get_visit_service),
):
    """Visits within an inclusive date range"""
    result = service.get_visits_by_date(
        parse_date_param(start_date, "startDate", required=True),
        parse_date_param(end_date, "endDate", required=True),
        agent_id=agent_id,
        status=status,
        type=type,
    )
    return format_api_response(result)


@router.get("/calendar")
async def get_calendar_events(
    start: str = Query(...),
    end: str = Query(...),
    agent_id: Optional[str] = Query(None, alias="agentId"),
    current_user: User = Depends(require_permission("manage:visits")),
    service: VisitService = Depends(get_visit_service),
):
    """Visits shaped as one-hour calendar events"""
    events = service.get_calendar_events(
        parse_date_param(start, "start", required=True),
        parse_date_param(end, "end", required=True),
        agent_id=agent_id,
    )
    return format_api_response(events)


@router.get("/check-conflict")
async def check_conflict(
    property_id: str = Query(..., alias="propertyId", min_length=1),
    date: str = Query(...),
    time: str = Query(...),
    exclude_visit_id: Optional[str] = Query(None, alias="excludeVisitId"),
    service: VisitService = Depends(get_visit_service),
):
    """Check whether a proposed visit time clashes with existing bookings"""
    try:
        normalized_time = validate_time(time)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    result = service.check_conflict(
        property_id,
        parse_date_param(date, "date", required=True),
        normalized_time,
        exclude_visit_id,
    )
    return format_api_response(ConflictCheckResponse(**result))


@router.get("/stats")
async def get_visit_stats(
    current_user: User = Depends(require_permission("view:analytics")),
    service: VisitService = Depends(get_visit_service),
):
    """Visit counts by status and type for the dashboard"""
    return format_api_response(service.get_stats())


@router.get("/upcoming")
async def get_upcoming_visits(
    limit: int = Query(5, ge=1, le=100),
    agent_id: Optional[str] = Query(None, alias="agentId"),
    current_user: User = Depends(require_permission("manage:visits")),
    service: VisitService = Depends(get_visit_service),
):
    """Pending and confirmed visits from today onwards"""
    return format_api_response(service.get_upcoming(limit, agent_id))


# ============================================================================
# SINGLE VISIT ROUTES
# ============================================================================


@router.get("/{visit_id}")
async def get_visit(
    visit_id: str,
    current_user: User = Depends(require_permission("manage:visits")),
    service: VisitService = Depends(get_visit_service),
):
    """Get a visit with its property, client and agent"""
    visit = service.get_visit(visit_id)
    return format_api_response(visit_to_dict(visit, include_relations=True))


@router.put("/{visit_id}")
async def replace_visit(
    visit_id: str,
    data: VisitUpdate,
    current_user: User = Depends(require_permission("manage:visits")),
    service: VisitService = Depends(get_visit_service),
):
    """Update a visit"""
    visit = service.update_visit(visit_id, data)
    return format_api_response(visit_to_dict(visit, include_relations=True))


@router.patch("/{visit_id}")
async def update_visit(
    visit_id: str,
    data: VisitUpdate,
    current_user: User = Depends(require_permission("manage:visits")),
    service: VisitService = Depends(get_visit_service),
):
    """Update specific fields of a visit"""
    visit = service.update_visit(visit_id, data)
    return format_api_response(visit_to_dict(visit, include_relations=True))


@router.delete("/{visit_id}")
async def delete_visit(
    visit_id: str,
    current_user: User = Depends(require_permission("manage:visits")),
    service: VisitService = Depends(get_visit_service),
):
    """Delete a visit"""
    service.delete_visit(visit_id)
    return format_api_success("Visit deleted")
