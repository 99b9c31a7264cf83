"""Visit service - Business logic for visit scheduling"""

import logging
import math
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import User
from ...models_visit import ACTIVE_VISIT_STATUSES, VISIT_STATUSES, VISIT_TYPES, Visit
from ..properties.repository import PropertyRepository
from ..properties.service import property_to_response
from ..users.repository import UserRepository
from .repository import VisitRepository
from .scheduling import (
    INITIAL_STATUSES,
    build_calendar_event,
    compute_visit_stats,
    has_time_conflict,
    validate_status_transition,
)
from .schemas import VisitCreate, VisitUpdate

logger = logging.getLogger(__name__)

# Request field -> column
FIELD_MAP = {
    "propertyId": "property_id",
    "clientId": "client_id",
    "agentId": "agent_id",
    "date": "date",
    "time": "time",
    "type": "type",
    "status": "status",
    "notes": "notes",
}

# Fields a partial update may clear by sending null
NULLABLE_FIELDS = {"agentId", "notes"}


def visit_to_dict(visit: Visit, include_relations: bool = False) -> dict:
    """Flatten a visit with the property and client fields the dashboard lists need"""
    prop = visit.property
    client = visit.client
    agent = visit.agent

    data = {
        "id": visit.id,
        "propertyId": visit.property_id,
        "propertyTitle": prop.title,
        "propertyImage": prop.image,
        "propertyAddress": prop.address,
        "clientId": visit.client_id,
        "clientName": client.name,
        "clientEmail": client.email,
        "clientPhone": client.phone or "",
        "date": visit.date,
        "time": visit.time,
        "type": visit.type,
        "status": visit.status,
        "agentId": visit.agent_id,
        "agentName": agent.name if agent else None,
        "agentEmail": agent.email if agent else None,
        "notes": visit.notes,
        "createdAt": visit.created_at,
        "updatedAt": visit.updated_at,
    }

    if include_relations:
        data["property"] = property_to_response(prop)
        data["client"] = {
            "id": client.id,
            "name": client.name,
            "email": client.email,
            "phone": client.phone,
        }
        data["agent"] = (
            {
                "id": agent.id,
                "name": agent.name,
                "email": agent.email,
                "avatarUrl": agent.avatar_url,
            }
            if agent
            else None
        )

    return data


class VisitService:
    """Service layer for visit business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = VisitRepository()
        self.property_repo = PropertyRepository()
        self.user_repo = UserRepository()

    # ========================================================================
    # CONFLICT DETECTION
    # ========================================================================

    def check_conflict(
        self,
        property_id: str,
        visit_date: date,
        time: str,
        exclude_visit_id: Optional[str] = None,
    ) -> dict:
        """
        Check whether a proposed time clashes with active visits on the same property and day.

        Returns {"hasConflict": bool, "conflictingVisits": int}; the count is the
        number of active visits that day when a conflict exists, otherwise 0.
        """
        same_day = self.repo.get_active_visits_on_day(
            self.db, property_id, visit_date, exclude_visit_id
        )
        has_conflict = has_time_conflict(time, (v.time for v in same_day))
        return {
            "hasConflict": has_conflict,
            "conflictingVisits": len(same_day) if has_conflict else 0,
        }

    def _ensure_slot_free(
        self,
        property_id: str,
        visit_date: date,
        time: str,
        exclude_visit_id: Optional[str] = None,
    ) -> None:
        """Lock the property row, then reject the booking if the slot is taken"""
        prop = self.property_repo.lock_property(self.db, property_id)
        if not prop:
            raise HTTPException(status_code=404, detail="Property not found")

        result = self.check_conflict(property_id, visit_date, time, exclude_visit_id)
        if result["hasConflict"]:
            self.db.rollback()
            logger.warning(
                f"⚠️ Booking conflict on property {property_id} at {visit_date} {time} "
                f"({result['conflictingVisits']} active visit(s) that day)"
            )
            raise HTTPException(
                status_code=409,
                detail="Another visit is already scheduled within an hour of this time",
            )

    def _ensure_references(
        self,
        property_id: Optional[str] = None,
        client_id: Optional[str] = None,
        agent_id: Optional[str] = None,
    ) -> None:
        if property_id and not self.property_repo.get_property_by_id(self.db, property_id):
            raise HTTPException(status_code=404, detail="Property not found")
        if client_id and not self.user_repo.get_user_by_id(self.db, client_id):
            raise HTTPException(status_code=404, detail="Client not found")
        if agent_id:
            agent = self.user_repo.get_user_by_id(self.db, agent_id)
            if not agent or agent.role != "agent":
                raise HTTPException(status_code=404, detail="Agent not found")

    # ========================================================================
    # QUERIES
    # ========================================================================

    def get_visits(
        self,
        property_id: Optional[str] = None,
        status: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        include_properties: bool = False,
        limit: Optional[int] = None,
        page: int = 1,
    ):
        statuses = [s.strip() for s in status.split(",") if s.strip()] if status else None
        if statuses:
            invalid = [s for s in statuses if s not in VISIT_STATUSES]
            if invalid:
                raise HTTPException(
                    status_code=400, detail=f"Invalid visit status: {', '.join(invalid)}"
                )

        offset = (page - 1) * limit if limit else 0
        visits, total = self.repo.get_visits(
            self.db,
            property_id=property_id,
            statuses=statuses,
            start_date=start_date,
            end_date=end_date,
            limit=limit,
            offset=offset,
        )
        items = [visit_to_dict(v, include_relations=include_properties) for v in visits]

        if limit:
            return {
                "data": items,
                "pagination": {
                    "total": total,
                    "page": page,
                    "limit": limit,
                    "totalPages": math.ceil(total / limit),
                },
            }
        return items

    def get_visits_by_date(
        self,
        start_date: date,
        end_date: date,
        agent_id: Optional[str] = None,
        status: Optional[str] = None,
        type: Optional[str] = None,
    ) -> dict:
        if status and status not in VISIT_STATUSES:
            raise HTTPException(status_code=400, detail=f"Invalid visit status: {status}")
        if type and type not in VISIT_TYPES:
            raise HTTPException(status_code=400, detail=f"Invalid visit type: {type}")

        visits = self.repo.get_visits_in_range(
            self.db, start_date, end_date, agent_id=agent_id, status=status, type=type
        )
        return {
            "visits": [visit_to_dict(v) for v in visits],
            "count": len(visits),
            "dateRange": {"start": start_date, "end": end_date},
        }

    def get_calendar_events(
        self, start_date: date, end_date: date, agent_id: Optional[str] = None
    ) -> list[dict]:
        visits = self.repo.get_visits_in_range(self.db, start_date, end_date, agent_id=agent_id)
        return [build_calendar_event(v) for v in visits]

    def get_stats(self) -> dict:
        return compute_visit_stats(self.repo.get_all(self.db))

    def get_upcoming(self, limit: int, agent_id: Optional[str] = None) -> list[dict]:
        visits = self.repo.get_upcoming(self.db, date.today(), limit, agent_id)
        return [visit_to_dict(v) for v in visits]

    def get_visit(self, visit_id: str) -> Visit:
        visit = self.repo.get_visit_by_id(self.db, visit_id)
        if not visit:
            raise HTTPException(status_code=404, detail="Visit not found")
        return visit

    # ========================================================================
    # MUTATIONS
    # ========================================================================

    def create_visit(self, data: VisitCreate, current_user: User) -> Visit:
        """Book a visit; the conflict check and insert share one transaction"""
        if current_user.role == "client" and data.clientId != current_user.id:
            raise HTTPException(status_code=403, detail="Clients can only book visits for themselves")

        if data.status not in INITIAL_STATUSES:
            raise HTTPException(
                status_code=400,
                detail=f"New visits must start as {' or '.join(INITIAL_STATUSES)}",
            )

        self._ensure_references(client_id=data.clientId, agent_id=data.agentId)
        self._ensure_slot_free(data.propertyId, data.date, data.time)

        values = {FIELD_MAP[k]: v for k, v in data.model_dump().items()}
        visit = self.repo.create_visit(self.db, **values)
        logger.info(
            f"📅 Visit {visit.id} booked for property {visit.property_id} "
            f"on {visit.date} at {visit.time} ({visit.status})"
        )
        return visit

    def update_visit(self, visit_id: str, data: VisitUpdate) -> Visit:
        """Apply the fields sent, enforcing the status workflow and the conflict window"""
        visit = self.get_visit(visit_id)

        changes = {
            k: v
            for k, v in data.model_dump(exclude_unset=True).items()
            if v is not None or k in NULLABLE_FIELDS
        }

        self._ensure_references(
            property_id=changes.get("propertyId"),
            client_id=changes.get("clientId"),
            agent_id=changes.get("agentId"),
        )

        new_status = changes.get("status", visit.status)
        if "status" in changes:
            validate_status_transition(visit.status, new_status)

        new_property_id = changes.get("propertyId", visit.property_id)
        new_date = changes.get("date", visit.date)
        new_time = changes.get("time", visit.time)

        reschedules = (
            new_property_id != visit.property_id
            or new_date != visit.date
            or new_time != visit.time
        )
        if new_status in ACTIVE_VISIT_STATUSES and reschedules:
            self._ensure_slot_free(new_property_id, new_date, new_time, exclude_visit_id=visit.id)

        old_status = visit.status
        updates = {FIELD_MAP[k]: v for k, v in changes.items()}
        visit = self.repo.update_visit(self.db, visit, **updates)

        if new_status != old_status:
            logger.info(f"🔄 Visit {visit.id} status changed from {old_status} to {new_status}")
        logger.info(f"✏️ Updated visit {visit.id}: {', '.join(changes) or 'no changes'}")
        return visit

    def delete_visit(self, visit_id: str) -> None:
        visit = self.get_visit(visit_id)
        self.repo.delete_visit(self.db, visit)
        logger.info(f"🗑️ Deleted visit {visit_id}")
