from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from .models import User
from .shared.validators import validate_email


class UserResponse(BaseModel):
    """Public view of a user account; the password hash is never included"""

    id: str
    name: str
    email: str
    phone: Optional[str] = None
    avatarUrl: Optional[str] = None
    role: str
    isActive: bool
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    class Config:
        from_attributes = True


def user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        name=user.name,
        email=user.email,
        phone=user.phone,
        avatarUrl=user.avatar_url,
        role=user.role,
        isActive=user.is_active,
        createdAt=user.created_at,
        updatedAt=user.updated_at,
    )


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return validate_email(v)


class LoginResponse(BaseModel):
    token: str
    tokenType: str = "bearer"
    expiresAt: datetime
    user: UserResponse
