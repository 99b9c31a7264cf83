"""Property repository - Database operations for properties"""

from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ...models import AgentProperty, Property
from ...models_visit import ACTIVE_VISIT_STATUSES, Visit


class PropertyRepository:
    """Repository for property database operations"""

    @staticmethod
    def get_properties(
        db: Session,
        type: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        min_bedrooms: Optional[int] = None,
        location: Optional[str] = None,
        keyword: Optional[str] = None,
        featured: Optional[bool] = None,
        status: Optional[str] = None,
    ) -> list[Property]:
        """Search properties, most recently updated first"""
        query = db.query(Property)

        if type:
            query = query.filter(Property.type == type)
        if min_price is not None:
            query = query.filter(Property.price >= min_price)
        if max_price is not None:
            query = query.filter(Property.price <= max_price)
        if min_bedrooms is not None:
            query = query.filter(Property.bedrooms >= min_bedrooms)
        if location:
            query = query.filter(Property.location.ilike(f"%{location}%"))
        if keyword:
            search_term = f"%{keyword}%"
            query = query.filter(
                or_(
                    Property.title.ilike(search_term),
                    Property.description.ilike(search_term),
                    Property.location.ilike(search_term),
                )
            )
        if featured is not None:
            query = query.filter(Property.is_featured == featured)
        if status:
            query = query.filter(Property.status == status)

        return query.order_by(Property.updated_at.desc()).all()

    @staticmethod
    def get_featured(db: Session, limit: int) -> list[Property]:
        return (
            db.query(Property)
            .filter(Property.is_featured.is_(True), Property.status.in_(("published", "featured")))
            .order_by(Property.updated_at.desc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_with_active_visits(db: Session, limit: Optional[int] = None) -> list[tuple[Property, int]]:
        """Properties with at least one pending/confirmed visit, paired with that visit count"""
        query = (
            db.query(Property, func.count(Visit.id))
            .join(Visit, Visit.property_id == Property.id)
            .filter(Visit.status.in_(ACTIVE_VISIT_STATUSES))
            .group_by(Property.id)
            .order_by(Property.updated_at.desc())
        )
        if limit:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def get_property_by_id(db: Session, property_id: str) -> Optional[Property]:
        return db.query(Property).filter(Property.id == property_id).first()

    @staticmethod
    def lock_property(db: Session, property_id: str) -> Optional[Property]:
        """Load a property with a row lock held until the transaction ends"""
        return db.query(Property).filter(Property.id == property_id).with_for_update().first()

    @staticmethod
    def create_property(db: Session, **property_data) -> Property:
        prop = Property(**property_data)
        db.add(prop)
        db.commit()
        db.refresh(prop)
        return prop

    @staticmethod
    def update_property(db: Session, prop: Property, **updates) -> Property:
        """Update a property with provided fields"""
        for key, value in updates.items():
            if hasattr(prop, key):
                setattr(prop, key, value)

        db.commit()
        db.refresh(prop)
        return prop

    @staticmethod
    def delete_property(db: Session, prop: Property) -> int:
        """
        Delete a property together with its visits and agent assignments.
        Returns the number of visits removed.
        """
        deleted_visits = (
            db.query(Visit).filter(Visit.property_id == prop.id).delete(synchronize_session=False)
        )
        db.query(AgentProperty).filter(AgentProperty.property_id == prop.id).delete(
            synchronize_session=False
        )
        db.delete(prop)
        db.commit()
        return deleted_visits
