"""Property domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models import PROPERTY_STATUSES, PROPERTY_TYPES


def _check_type(v):
    if v is not None and v not in PROPERTY_TYPES:
        raise ValueError(f"type must be one of: {', '.join(PROPERTY_TYPES)}")
    return v


def _check_status(v):
    if v is not None and v not in PROPERTY_STATUSES:
        raise ValueError(f"status must be one of: {', '.join(PROPERTY_STATUSES)}")
    return v


class PropertyCreate(BaseModel):
    """Schema for creating (or fully replacing) a property"""

    title: str = Field(..., min_length=5)
    price: float = Field(..., gt=0)
    location: str = Field(..., min_length=3)
    image: Optional[str] = None
    bedrooms: int = Field(..., ge=0)
    bathrooms: int = Field(..., ge=0)
    area: float = Field(..., gt=0)
    type: str
    description: str = ""
    propertyType: Optional[str] = None
    address: Optional[str] = None
    features: list[str] = []
    status: str = "draft"
    isNew: bool = False
    isFeatured: bool = False

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        return _check_type(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return _check_status(v)


class PropertyUpdate(BaseModel):
    """Schema for a partial property update"""

    title: Optional[str] = Field(None, min_length=5)
    price: Optional[float] = Field(None, gt=0)
    location: Optional[str] = Field(None, min_length=3)
    image: Optional[str] = None
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    area: Optional[float] = Field(None, gt=0)
    type: Optional[str] = None
    description: Optional[str] = None
    propertyType: Optional[str] = None
    address: Optional[str] = None
    features: Optional[list[str]] = None
    status: Optional[str] = None
    isNew: Optional[bool] = None
    isFeatured: Optional[bool] = None

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        return _check_type(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return _check_status(v)


class PropertyResponse(BaseModel):
    """Schema for property response"""

    id: str
    title: str
    price: float
    location: str
    image: Optional[str]
    bedrooms: int
    bathrooms: int
    area: float
    type: str
    description: Optional[str]
    propertyType: Optional[str]
    address: Optional[str]
    features: list[str]
    status: str
    isNew: bool
    isFeatured: bool
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    class Config:
        from_attributes = True


class FeaturedPropertyResponse(BaseModel):
    """Card-sized projection used by the featured listing"""

    id: str
    title: str
    price: float
    location: str
    image: Optional[str]
    bedrooms: int
    bathrooms: int
    area: float
    type: str
    isNew: bool
    propertyType: Optional[str]
    status: str
