"""Property router - FastAPI endpoints for property listings"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_permission
from ...database import get_db
from ...models import User
from ...shared.responses import format_api_response, format_api_success
from .schemas import PropertyCreate, PropertyUpdate
from .service import PropertyService, property_to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/properties", tags=["Properties"])


def get_property_service(db: Session = Depends(get_db)) -> PropertyService:
    """Dependency injection for PropertyService"""
    return PropertyService(db)


# ============================================================================
# PUBLIC ROUTES
# ============================================================================


@router.get("")
async def get_properties(
    type: Optional[str] = Query(None),
    min_price: Optional[float] = Query(None, alias="minPrice"),
    max_price: Optional[float] = Query(None, alias="maxPrice"),
    min_bedrooms: Optional[int] = Query(None, alias="minBedrooms"),
    location: Optional[str] = Query(None),
    keyword: Optional[str] = Query(None),
    featured: Optional[bool] = Query(None),
    status: Optional[str] = Query(None),
    service: PropertyService = Depends(get_property_service),
):
    """Search properties with optional filters"""
    properties = service.get_properties(
        type=type,
        min_price=min_price,
        max_price=max_price,
        min_bedrooms=min_bedrooms,
        location=location,
        keyword=keyword,
        featured=featured,
        status=status,
    )
    return format_api_response(properties)


@router.get("/featured")
async def get_featured_properties(
    limit: int = Query(6, ge=1, le=50),
    service: PropertyService = Depends(get_property_service),
):
    """Featured listings for the home page"""
    return format_api_response(service.get_featured(limit))


@router.get("/with-visits")
async def get_properties_with_visits(
    limit: Optional[int] = Query(None, ge=1),
    include_visit_count: bool = Query(False, alias="includeVisitCount"),
    current_user: User = Depends(require_permission("manage:visits")),
    service: PropertyService = Depends(get_property_service),
):
    """Properties that have pending or confirmed visits"""
    return format_api_response(service.get_with_visits(limit, include_visit_count))


@router.get("/{property_id}")
async def get_property(
    property_id: str,
    service: PropertyService = Depends(get_property_service),
):
    """Get a single property"""
    return format_api_response(property_to_response(service.get_property(property_id)))


# ============================================================================
# ADMIN ROUTES
# ============================================================================


@router.post("")
async def create_property(
    data: PropertyCreate,
    current_user: User = Depends(require_permission("manage:properties")),
    service: PropertyService = Depends(get_property_service),
):
    """Create a new property"""
    prop = service.create_property(data)
    return format_api_response(property_to_response(prop), status_code=201)


@router.put("/{property_id}")
async def replace_property(
    property_id: str,
    data: PropertyCreate,
    current_user: User = Depends(require_permission("manage:properties")),
    service: PropertyService = Depends(get_property_service),
):
    """Replace every field of a property"""
    prop = service.replace_property(property_id, data)
    return format_api_response(property_to_response(prop))


@router.patch("/{property_id}")
async def update_property(
    property_id: str,
    data: PropertyUpdate,
    current_user: User = Depends(require_permission("manage:properties")),
    service: PropertyService = Depends(get_property_service),
):
    """Update specific fields of a property"""
    prop = service.update_property(property_id, data)
    return format_api_response(property_to_response(prop))


@router.delete("/{property_id}")
async def delete_property(
    property_id: str,
    current_user: User = Depends(require_permission("manage:properties")),
    service: PropertyService = Depends(get_property_service),
):
    """Delete a property along with its visits and agent assignments"""
    service.delete_property(property_id)
    return format_api_success("Property deleted")
