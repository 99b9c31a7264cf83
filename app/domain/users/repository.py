"""User repository - Database operations for user accounts"""

from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ...models import AgentProperty, User
from ...models_visit import AgentAvailability, Visit


def _search_filter(query, search: Optional[str]):
    if search:
        search_term = f"%{search}%"
        query = query.filter(or_(User.name.ilike(search_term), User.email.ilike(search_term)))
    return query


class UserRepository:
    """Repository for user database operations"""

    @staticmethod
    def get_users(
        db: Session,
        role: Optional[str] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> list[User]:
        query = db.query(User)

        if role:
            query = query.filter(User.role == role)
        if is_active is not None:
            query = query.filter(User.is_active == is_active)
        query = _search_filter(query, search)

        return query.order_by(User.name.asc()).all()

    @staticmethod
    def get_agents(
        db: Session,
        active: Optional[bool] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> tuple[list[User], int]:
        """Agents ordered by name, plus the unpaginated total"""
        query = db.query(User).filter(User.role == "agent")
        if active is not None:
            query = query.filter(User.is_active == active)
        query = _search_filter(query, search)

        total = query.count()

        query = query.order_by(User.name.asc())
        if limit:
            query = query.offset(offset).limit(limit)

        return query.all(), total

    @staticmethod
    def get_agent_counts(db: Session, agent_ids: list[str]) -> tuple[dict[str, int], dict[str, int]]:
        """Assigned property and visit counts per agent id"""
        if not agent_ids:
            return {}, {}

        property_counts = dict(
            db.query(AgentProperty.agent_id, func.count(AgentProperty.id))
            .filter(AgentProperty.agent_id.in_(agent_ids))
            .group_by(AgentProperty.agent_id)
            .all()
        )
        visit_counts = dict(
            db.query(Visit.agent_id, func.count(Visit.id))
            .filter(Visit.agent_id.in_(agent_ids))
            .group_by(Visit.agent_id)
            .all()
        )
        return property_counts, visit_counts

    @staticmethod
    def get_user_by_id(db: Session, user_id: str) -> Optional[User]:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def count_visits(db: Session, user_id: str) -> int:
        """Visits where the user is either the client or the agent"""
        return (
            db.query(func.count(Visit.id))
            .filter(or_(Visit.client_id == user_id, Visit.agent_id == user_id))
            .scalar()
        )

    @staticmethod
    def has_agent_records(db: Session, user_id: str) -> bool:
        """True while availability, property assignments or agent visits reference the user"""
        return any(
            db.query(model).filter(column == user_id).first() is not None
            for model, column in (
                (AgentAvailability, AgentAvailability.agent_id),
                (AgentProperty, AgentProperty.agent_id),
                (Visit, Visit.agent_id),
            )
        )

    @staticmethod
    def create_user(db: Session, **user_data) -> User:
        user = User(**user_data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_user(db: Session, user: User, **updates) -> User:
        for key, value in updates.items():
            if hasattr(user, key):
                setattr(user, key, value)

        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def delete_user(db: Session, user: User) -> None:
        """Delete a user along with their availability and property assignments"""
        db.query(AgentAvailability).filter(AgentAvailability.agent_id == user.id).delete(
            synchronize_session=False
        )
        db.query(AgentProperty).filter(AgentProperty.agent_id == user.id).delete(
            synchronize_session=False
        )
        db.delete(user)
        db.commit()
