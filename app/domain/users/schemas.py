"""User domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models import USER_ROLES
from ...shared.validators import validate_email


def _check_role(v):
    if v is not None and v not in USER_ROLES:
        raise ValueError(f"role must be one of: {', '.join(USER_ROLES)}")
    return v


class UserCreate(BaseModel):
    """Schema for creating a user account"""

    name: str = Field(..., min_length=2)
    email: str
    password: str = Field(..., min_length=6)
    phone: Optional[str] = None
    avatarUrl: Optional[str] = None
    role: str = "client"
    isActive: bool = True

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return validate_email(v)

    @field_validator("role")
    @classmethod
    def validate_role(cls, v):
        return _check_role(v)


class UserUpdate(BaseModel):
    """Schema for an administrative user update; only the fields sent change"""

    name: Optional[str] = Field(None, min_length=2)
    email: Optional[str] = None
    password: Optional[str] = Field(None, min_length=6)
    phone: Optional[str] = None
    avatarUrl: Optional[str] = None
    role: Optional[str] = None
    isActive: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return validate_email(v)

    @field_validator("role")
    @classmethod
    def validate_role(cls, v):
        return _check_role(v)


class ProfileUpdate(BaseModel):
    """
    Self-service update for /users/me.

    Sending both currentPassword and newPassword changes the password;
    otherwise the profile fields are applied.
    """

    name: Optional[str] = Field(None, min_length=2)
    phone: Optional[str] = None
    avatarUrl: Optional[str] = None
    currentPassword: Optional[str] = None
    newPassword: Optional[str] = Field(None, min_length=6)


class AgentStats(BaseModel):
    properties: int
    visits: int


class AgentResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    avatarUrl: str
    isActive: bool
    createdAt: Optional[datetime] = None
    stats: AgentStats
