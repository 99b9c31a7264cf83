"""User service - Business logic for accounts, agents and self-service profiles"""

import logging
import math
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import USER_ROLES, User
from ...security_utils import hash_password_bcrypt, verify_password_bcrypt
from .repository import UserRepository
from .schemas import AgentResponse, AgentStats, ProfileUpdate, UserCreate, UserUpdate

logger = logging.getLogger(__name__)

FIELD_MAP = {
    "name": "name",
    "email": "email",
    "phone": "phone",
    "avatarUrl": "avatar_url",
    "role": "role",
    "isActive": "is_active",
}

# Fields a partial update may clear by sending null
NULLABLE_FIELDS = {"phone", "avatarUrl"}


class UserService:
    """Service layer for user business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    def get_users(
        self,
        role: Optional[str] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> list[User]:
        if role and role not in USER_ROLES:
            raise HTTPException(status_code=400, detail=f"Invalid role: {role}")
        return self.repo.get_users(self.db, role=role, is_active=is_active, search=search)

    def get_user(self, user_id: str) -> User:
        user = self.repo.get_user_by_id(self.db, user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    def create_user(self, data: UserCreate) -> User:
        if self.repo.get_user_by_email(self.db, data.email):
            logger.warning(f"⚠️ Attempt to register duplicate email {data.email}")
            raise HTTPException(status_code=409, detail="Email is already registered")

        user = self.repo.create_user(
            self.db,
            name=data.name,
            email=data.email,
            password=hash_password_bcrypt(data.password),
            phone=data.phone,
            avatar_url=data.avatarUrl,
            role=data.role,
            is_active=data.isActive,
        )
        logger.info(f"👤 Created {user.role} account {user.email}")
        return user

    def update_user(self, user_id: str, data: UserUpdate) -> User:
        user = self.get_user(user_id)
        changes = {
            k: v
            for k, v in data.model_dump(exclude_unset=True).items()
            if v is not None or k in NULLABLE_FIELDS
        }

        if "email" in changes and changes["email"] != user.email:
            if self.repo.get_user_by_email(self.db, changes["email"]):
                raise HTTPException(status_code=409, detail="Email is already registered")

        if (
            user.role == "agent"
            and changes.get("role", "agent") != "agent"
            and self.repo.has_agent_records(self.db, user.id)
        ):
            raise HTTPException(
                status_code=400,
                detail="Agent still has availability, property assignments or visits; reassign them first",
            )

        updates = {FIELD_MAP[k]: v for k, v in changes.items() if k in FIELD_MAP}
        if "password" in changes:
            updates["password"] = hash_password_bcrypt(changes["password"])

        user = self.repo.update_user(self.db, user, **updates)
        logger.info(f"✏️ Updated user {user.id}: {', '.join(changes) or 'no changes'}")
        return user

    def delete_user(self, user_id: str, soft_delete: bool = False) -> str:
        """Remove a user, or only deactivate the account when soft_delete is set"""
        user = self.get_user(user_id)

        if soft_delete:
            self.repo.update_user(self.db, user, is_active=False)
            logger.info(f"🔒 Deactivated user {user_id}")
            return "User deactivated"

        if self.repo.count_visits(self.db, user_id):
            raise HTTPException(
                status_code=400,
                detail="User has visits on record; deactivate the account instead",
            )

        self.repo.delete_user(self.db, user)
        logger.info(f"🗑️ Deleted user {user_id}")
        return "User deleted"

    # ========================================================================
    # AGENTS
    # ========================================================================

    def get_agents(
        self,
        active: Optional[bool] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        page: int = 1,
    ) -> dict:
        offset = (page - 1) * limit if limit else 0
        agents, total = self.repo.get_agents(
            self.db, active=active, search=search, limit=limit, offset=offset
        )
        property_counts, visit_counts = self.repo.get_agent_counts(
            self.db, [a.id for a in agents]
        )

        pagination = (
            {
                "page": page,
                "limit": limit,
                "totalPages": math.ceil(total / limit),
                "totalItems": total,
            }
            if limit
            else None
        )

        return {
            "agents": [
                AgentResponse(
                    id=a.id,
                    name=a.name,
                    email=a.email,
                    phone=a.phone or "",
                    avatarUrl=a.avatar_url or "",
                    isActive=a.is_active,
                    createdAt=a.created_at,
                    stats=AgentStats(
                        properties=property_counts.get(a.id, 0),
                        visits=visit_counts.get(a.id, 0),
                    ),
                )
                for a in agents
            ],
            "pagination": pagination,
            "total": total,
        }

    # ========================================================================
    # SELF SERVICE
    # ========================================================================

    def update_profile(self, user: User, data: ProfileUpdate) -> Optional[User]:
        """
        Apply a /users/me update.

        Returns the updated user, or None when the request changed the password.
        """
        if data.currentPassword and data.newPassword:
            if not verify_password_bcrypt(data.currentPassword, user.password):
                logger.warning(f"🔒 Wrong current password on password change for {user.email}")
                raise HTTPException(status_code=400, detail="Current password is incorrect")

            self.repo.update_user(self.db, user, password=hash_password_bcrypt(data.newPassword))
            logger.info(f"🔑 Password changed for {user.email}")
            return None

        changes = {
            k: v
            for k, v in data.model_dump(
                exclude_unset=True, include={"name", "phone", "avatarUrl"}
            ).items()
            if v is not None or k in NULLABLE_FIELDS
        }
        updates = {FIELD_MAP[k]: v for k, v in changes.items()}
        return self.repo.update_user(self.db, user, **updates)
