"""Availability router - FastAPI endpoints for agent weekly schedules"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...shared.responses import format_api_response
from .schemas import AvailabilityUpdate
from .service import AvailabilityService

router = APIRouter(prefix="/availability", tags=["Availability"])


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    """Dependency injection for AvailabilityService"""
    return AvailabilityService(db)


@router.get("")
async def list_availability(
    active_only: bool = Query(False, alias="activeOnly"),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Every agent with their weekly schedule"""
    return format_api_response(service.list_agent_availability(active_only))


@router.get("/{agent_id}")
async def get_availability(
    agent_id: str,
    service: AvailabilityService = Depends(get_availability_service),
):
    """An agent's weekly schedule, or the default template if none is saved"""
    return format_api_response(service.get_availability(agent_id))


@router.put("/{agent_id}")
async def update_availability(
    agent_id: str,
    data: AvailabilityUpdate,
    current_user: User = Depends(get_current_user),
    service: AvailabilityService = Depends(get_availability_service),
):
    """Replace an agent's weekly schedule"""
    return format_api_response(
        service.update_availability(agent_id, data.availability, current_user)
    )
