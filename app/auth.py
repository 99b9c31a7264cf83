import logging
from datetime import timedelta

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .config import SESSION_MAX_AGE_DAYS
from .database import get_db
from .models import User
from .security_utils import create_jwt_token, verify_jwt_token

logger = logging.getLogger(__name__)

# auto_error=False so a missing header surfaces as 401 from get_current_user
security = HTTPBearer(auto_error=False)

# Permissions granted to each role. Clients hold none: they may only book
# visits for themselves and manage their own profile.
ROLE_PERMISSIONS: dict[str, set[str]] = {
    "superadmin": {
        "manage:users",
        "manage:properties",
        "manage:visits",
        "manage:agents",
        "view:analytics",
        "manage:settings",
    },
    "admin": {
        "manage:properties",
        "manage:visits",
        "manage:agents",
        "view:analytics",
    },
    "agent": {"manage:visits"},
    "client": set(),
}


def has_permission(user: User, permission: str) -> bool:
    return permission in ROLE_PERMISSIONS.get(user.role, set())


def create_session_token(user: User):
    """Issue a signed session token for an authenticated user"""
    return create_jwt_token(
        {"sub": user.id, "role": user.role, "email": user.email},
        expires_delta=timedelta(days=SESSION_MAX_AGE_DAYS),
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current user from the session token"""

    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    payload = verify_jwt_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid or expired session token")

    user = db.query(User).filter(User.id == payload["sub"]).first()
    if not user:
        logger.warning(f"⚠️ Token references unknown user {payload['sub']}")
        raise HTTPException(status_code=401, detail="Invalid or expired session token")

    if not user.is_active:
        logger.warning(f"⚠️ Inactive user {user.email} attempted to authenticate")
        raise HTTPException(status_code=401, detail="Account is disabled")

    logger.debug(f"✅ User authenticated: {user.email}")
    return user


def require_permission(permission: str):
    """
    Create a dependency that only lets through users whose role grants `permission`.

    Example usage:
        @router.post("")
        async def create_property(
            data: PropertyCreate,
            current_user: User = Depends(require_permission("manage:properties")),
        ):
            ...
    """

    async def permission_checker(user: User = Depends(get_current_user)) -> User:
        if not has_permission(user, permission):
            logger.warning(f"🚫 User {user.email} ({user.role}) lacks permission {permission}")
            raise HTTPException(status_code=403, detail="You do not have permission to perform this action")
        return user

    return permission_checker
