"""User router - FastAPI endpoints for user and agent management"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_permission
from ...database import get_db
from ...models import User
from ...schemas import user_to_response
from ...shared.responses import format_api_response, format_api_success
from .schemas import ProfileUpdate, UserCreate, UserUpdate
from .service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency injection for UserService"""
    return UserService(db)


@router.get("")
async def get_users(
    role: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    search: Optional[str] = Query(None),
    current_user: User = Depends(require_permission("manage:users")),
    service: UserService = Depends(get_user_service),
):
    """List users, alphabetically"""
    users = service.get_users(role=role, is_active=is_active, search=search)
    return format_api_response([user_to_response(u) for u in users])


@router.post("")
async def create_user(
    data: UserCreate,
    current_user: User = Depends(require_permission("manage:users")),
    service: UserService = Depends(get_user_service),
):
    """Create a user account"""
    user = service.create_user(data)
    return format_api_response(user_to_response(user), status_code=201)


@router.get("/agents")
async def get_agents(
    active: Optional[bool] = Query(None),
    search: Optional[str] = Query(None),
    limit: Optional[int] = Query(None, ge=1),
    page: int = Query(1, ge=1),
    current_user: User = Depends(require_permission("manage:agents")),
    service: UserService = Depends(get_user_service),
):
    """Agents with their property and visit counts"""
    return format_api_response(
        service.get_agents(active=active, search=search, limit=limit, page=page)
    )


@router.get("/me")
async def get_me(current_user: User = Depends(get_current_user)):
    """Get the signed-in user's profile"""
    return format_api_response(user_to_response(current_user))


@router.patch("/me")
async def update_me(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Update the signed-in user's profile or password"""
    user = service.update_profile(current_user, data)
    if user is None:
        return format_api_success("Password updated")
    return format_api_response(user_to_response(user))


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    current_user: User = Depends(require_permission("manage:users")),
    service: UserService = Depends(get_user_service),
):
    return format_api_response(user_to_response(service.get_user(user_id)))


@router.put("/{user_id}")
async def replace_user(
    user_id: str,
    data: UserUpdate,
    current_user: User = Depends(require_permission("manage:users")),
    service: UserService = Depends(get_user_service),
):
    return format_api_response(user_to_response(service.update_user(user_id, data)))


@router.patch("/{user_id}")
async def update_user(
    user_id: str,
    data: UserUpdate,
    current_user: User = Depends(require_permission("manage:users")),
    service: UserService = Depends(get_user_service),
):
    return format_api_response(user_to_response(service.update_user(user_id, data)))


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    soft_delete: bool = Query(False, alias="softDelete"),
    current_user: User = Depends(require_permission("manage:users")),
    service: UserService = Depends(get_user_service),
):
    """Delete a user, or deactivate them with softDelete=true"""
    return format_api_success(service.delete_user(user_id, soft_delete))
