"""Visit repository - Database operations for visits"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models_visit import ACTIVE_VISIT_STATUSES, Visit


def _with_relations(query):
    return query.options(
        joinedload(Visit.property),
        joinedload(Visit.client),
        joinedload(Visit.agent),
    )


class VisitRepository:
    """Repository for visit database operations"""

    @staticmethod
    def get_visits(
        db: Session,
        property_id: Optional[str] = None,
        statuses: Optional[list[str]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> tuple[list[Visit], int]:
        """Filtered visits in chronological order, plus the unpaginated total"""
        query = db.query(Visit)

        if property_id:
            query = query.filter(Visit.property_id == property_id)
        if statuses:
            query = query.filter(Visit.status.in_(statuses))
        if start_date:
            query = query.filter(Visit.date >= start_date)
        if end_date:
            query = query.filter(Visit.date <= end_date)

        total = query.count()

        query = _with_relations(query).order_by(Visit.date.asc(), Visit.time.asc())
        if limit:
            query = query.offset(offset).limit(limit)

        return query.all(), total

    @staticmethod
    def get_visits_in_range(
        db: Session,
        start_date: date,
        end_date: date,
        agent_id: Optional[str] = None,
        status: Optional[str] = None,
        type: Optional[str] = None,
    ) -> list[Visit]:
        """Visits whose day falls within [start_date, end_date]"""
        query = db.query(Visit).filter(Visit.date >= start_date, Visit.date <= end_date)

        if agent_id:
            query = query.filter(Visit.agent_id == agent_id)
        if status:
            query = query.filter(Visit.status == status)
        if type:
            query = query.filter(Visit.type == type)

        return _with_relations(query).order_by(Visit.date.asc(), Visit.time.asc()).all()

    @staticmethod
    def get_active_visits_on_day(
        db: Session,
        property_id: str,
        visit_date: date,
        exclude_visit_id: Optional[str] = None,
    ) -> list[Visit]:
        """Pending/confirmed visits of a property on one calendar day"""
        query = db.query(Visit).filter(
            Visit.property_id == property_id,
            Visit.date == visit_date,
            Visit.status.in_(ACTIVE_VISIT_STATUSES),
        )
        if exclude_visit_id:
            query = query.filter(Visit.id != exclude_visit_id)
        return query.all()

    @staticmethod
    def get_upcoming(
        db: Session, from_date: date, limit: int, agent_id: Optional[str] = None
    ) -> list[Visit]:
        query = db.query(Visit).filter(
            Visit.date >= from_date,
            Visit.status.in_(ACTIVE_VISIT_STATUSES),
        )
        if agent_id:
            query = query.filter(Visit.agent_id == agent_id)

        return (
            _with_relations(query)
            .order_by(Visit.date.asc(), Visit.time.asc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_all(db: Session) -> list[Visit]:
        return db.query(Visit).all()

    @staticmethod
    def get_visit_by_id(db: Session, visit_id: str) -> Optional[Visit]:
        return _with_relations(db.query(Visit)).filter(Visit.id == visit_id).first()

    @staticmethod
    def create_visit(db: Session, **visit_data) -> Visit:
        visit = Visit(**visit_data)
        db.add(visit)
        db.commit()
        db.refresh(visit)
        return visit

    @staticmethod
    def update_visit(db: Session, visit: Visit, **updates) -> Visit:
        for key, value in updates.items():
            if hasattr(visit, key):
                setattr(visit, key, value)

        db.commit()
        db.refresh(visit)
        return visit

    @staticmethod
    def delete_visit(db: Session, visit: Visit) -> None:
        db.delete(visit)
        db.commit()
