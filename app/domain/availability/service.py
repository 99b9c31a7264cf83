"""Availability service - Business logic for agent weekly schedules"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...auth import has_permission
from ...models import User
from .repository import AvailabilityRepository
from .schemas import WeekAvailability
from .week import default_week_availability

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Service layer for agent availability"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = AvailabilityRepository()

    def _get_agent(self, agent_id: str) -> User:
        agent = self.repo.get_agent(self.db, agent_id)
        if not agent:
            raise HTTPException(status_code=404, detail="Agent not found")
        return agent

    def list_agent_availability(self, active_only: bool = False) -> dict:
        agents = self.repo.get_agents(self.db, active_only=active_only)
        stored = self.repo.get_week_data_by_agent(self.db, [a.id for a in agents])

        results = [
            {
                "id": agent.id,
                "name": agent.name,
                "email": agent.email,
                "avatarUrl": agent.avatar_url,
                "isActive": agent.is_active,
                "availability": stored.get(agent.id) or default_week_availability(),
                "hasCustomAvailability": agent.id in stored,
            }
            for agent in agents
        ]
        return {"agents": results, "count": len(results)}

    def get_availability(self, agent_id: str) -> dict:
        """Stored schedule for an agent, falling back to the default template"""
        agent = self._get_agent(agent_id)
        availability = self.repo.get_availability(self.db, agent_id)

        return {
            "agent": {"id": agent.id, "name": agent.name},
            "availability": availability.week_data if availability else default_week_availability(),
            "isDefault": availability is None,
        }

    def update_availability(
        self, agent_id: str, week: WeekAvailability, current_user: User
    ) -> dict:
        if current_user.id != agent_id and not has_permission(current_user, "manage:agents"):
            raise HTTPException(
                status_code=403, detail="You can only edit your own availability"
            )

        self._get_agent(agent_id)
        availability = self.repo.upsert_availability(self.db, agent_id, week.model_dump())
        logger.info(f"🗓️ Availability updated for agent {agent_id} by {current_user.email}")

        return {"message": "Availability updated", "availability": availability.week_data}
