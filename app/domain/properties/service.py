"""Property service - Business logic for property listings"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import PROPERTY_STATUSES, PROPERTY_TYPES, Property
from .repository import PropertyRepository
from .schemas import (
    FeaturedPropertyResponse,
    PropertyCreate,
    PropertyResponse,
    PropertyUpdate,
)

logger = logging.getLogger(__name__)

# Request field -> column
FIELD_MAP = {
    "title": "title",
    "price": "price",
    "location": "location",
    "image": "image",
    "bedrooms": "bedrooms",
    "bathrooms": "bathrooms",
    "area": "area",
    "type": "type",
    "description": "description",
    "propertyType": "property_type",
    "address": "address",
    "features": "features",
    "status": "status",
    "isNew": "is_new",
    "isFeatured": "is_featured",
}

# Columns a partial update may clear by sending null
NULLABLE_COLUMNS = {"image", "description", "property_type", "address"}


def property_to_response(prop: Property) -> PropertyResponse:
    return PropertyResponse(
        id=prop.id,
        title=prop.title,
        price=prop.price,
        location=prop.location,
        image=prop.image,
        bedrooms=prop.bedrooms,
        bathrooms=prop.bathrooms,
        area=prop.area,
        type=prop.type,
        description=prop.description,
        propertyType=prop.property_type,
        address=prop.address,
        features=prop.features or [],
        status=prop.status,
        isNew=prop.is_new,
        isFeatured=prop.is_featured,
        createdAt=prop.created_at,
        updatedAt=prop.updated_at,
    )


class PropertyService:
    """Service layer for property business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PropertyRepository()

    def get_properties(
        self,
        type: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        min_bedrooms: Optional[int] = None,
        location: Optional[str] = None,
        keyword: Optional[str] = None,
        featured: Optional[bool] = None,
        status: Optional[str] = None,
    ) -> list[PropertyResponse]:
        if type and type not in PROPERTY_TYPES:
            raise HTTPException(status_code=400, detail=f"Invalid property type: {type}")
        if status and status not in PROPERTY_STATUSES:
            raise HTTPException(status_code=400, detail=f"Invalid property status: {status}")

        properties = self.repo.get_properties(
            self.db,
            type=type,
            min_price=min_price,
            max_price=max_price,
            min_bedrooms=min_bedrooms,
            location=location,
            keyword=keyword,
            featured=featured,
            status=status,
        )
        return [property_to_response(p) for p in properties]

    def get_featured(self, limit: int) -> dict:
        properties = self.repo.get_featured(self.db, limit)
        featured = [
            FeaturedPropertyResponse(
                id=p.id,
                title=p.title,
                price=p.price,
                location=p.location,
                image=p.image,
                bedrooms=p.bedrooms,
                bathrooms=p.bathrooms,
                area=p.area,
                type=p.type,
                isNew=p.is_new,
                propertyType=p.property_type,
                status=p.status,
            )
            for p in properties
        ]
        return {"properties": featured, "count": len(featured)}

    def get_with_visits(self, limit: Optional[int], include_visit_count: bool) -> list[dict]:
        """Properties that currently have a pending or confirmed visit"""
        rows = self.repo.get_with_active_visits(self.db, limit)
        results = []
        for prop, visit_count in rows:
            item = property_to_response(prop).model_dump()
            if include_visit_count:
                item["visitCount"] = visit_count
            results.append(item)
        return results

    def get_property(self, property_id: str) -> Property:
        prop = self.repo.get_property_by_id(self.db, property_id)
        if not prop:
            raise HTTPException(status_code=404, detail="Property not found")
        return prop

    def create_property(self, data: PropertyCreate) -> Property:
        values = {FIELD_MAP[k]: v for k, v in data.model_dump().items()}
        prop = self.repo.create_property(self.db, **values)
        logger.info(f"🏠 Created property {prop.id}: {prop.title}")
        return prop

    def replace_property(self, property_id: str, data: PropertyCreate) -> Property:
        prop = self.get_property(property_id)
        values = {FIELD_MAP[k]: v for k, v in data.model_dump().items()}
        prop = self.repo.update_property(self.db, prop, **values)
        logger.info(f"✏️ Replaced property {prop.id}")
        return prop

    def update_property(self, property_id: str, data: PropertyUpdate) -> Property:
        prop = self.get_property(property_id)
        values = {
            FIELD_MAP[k]: v
            for k, v in data.model_dump(exclude_unset=True).items()
            if v is not None or FIELD_MAP[k] in NULLABLE_COLUMNS
        }
        prop = self.repo.update_property(self.db, prop, **values)
        logger.info(f"✏️ Updated property {prop.id}: {', '.join(values) or 'no changes'}")
        return prop

    def delete_property(self, property_id: str) -> None:
        prop = self.get_property(property_id)
        deleted_visits = self.repo.delete_property(self.db, prop)
        logger.info(f"🗑️ Deleted property {property_id} and {deleted_visits} visit(s)")
