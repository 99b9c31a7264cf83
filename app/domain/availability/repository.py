"""Availability repository - Database operations for agent weekly schedules"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import User
from ...models_visit import AgentAvailability


class AvailabilityRepository:
    """Repository for agent availability database operations"""

    @staticmethod
    def get_agents(db: Session, active_only: bool = False) -> list[User]:
        query = db.query(User).filter(User.role == "agent")
        if active_only:
            query = query.filter(User.is_active.is_(True))
        return query.order_by(User.name.asc()).all()

    @staticmethod
    def get_agent(db: Session, agent_id: str) -> Optional[User]:
        return db.query(User).filter(User.id == agent_id, User.role == "agent").first()

    @staticmethod
    def get_week_data_by_agent(db: Session, agent_ids: list[str]) -> dict[str, dict]:
        if not agent_ids:
            return {}
        rows = db.query(AgentAvailability).filter(AgentAvailability.agent_id.in_(agent_ids)).all()
        return {row.agent_id: row.week_data for row in rows}

    @staticmethod
    def get_availability(db: Session, agent_id: str) -> Optional[AgentAvailability]:
        return db.query(AgentAvailability).filter(AgentAvailability.agent_id == agent_id).first()

    @staticmethod
    def upsert_availability(db: Session, agent_id: str, week_data: dict) -> AgentAvailability:
        """Create the agent's schedule or replace the stored one"""
        availability = (
            db.query(AgentAvailability)
            .filter(AgentAvailability.agent_id == agent_id)
            .with_for_update()
            .first()
        )
        if availability:
            availability.week_data = week_data
        else:
            availability = AgentAvailability(agent_id=agent_id, week_data=week_data)
            db.add(availability)

        db.commit()
        db.refresh(availability)
        return availability
