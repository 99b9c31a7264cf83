"""Visit domain schemas - Pydantic models for validation"""

from datetime import date as DateType
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models_visit import VISIT_STATUSES, VISIT_TYPES
from ...shared.validators import parse_date, validate_time


def _coerce_date(v):
    if isinstance(v, str):
        return parse_date(v)
    return v


def _check_type(v):
    if v is not None and v not in VISIT_TYPES:
        raise ValueError(f"type must be one of: {', '.join(VISIT_TYPES)}")
    return v


def _check_status(v):
    if v is not None and v not in VISIT_STATUSES:
        raise ValueError(f"status must be one of: {', '.join(VISIT_STATUSES)}")
    return v


class VisitCreate(BaseModel):
    """Schema for booking a visit"""

    propertyId: str = Field(..., min_length=1)
    clientId: str = Field(..., min_length=1)
    date: DateType
    time: str
    type: str
    status: str = "pending"
    agentId: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v):
        return _coerce_date(v)

    @field_validator("time")
    @classmethod
    def validate_time_format(cls, v):
        return validate_time(v)

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        return _check_type(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return _check_status(v)


class VisitUpdate(BaseModel):
    """Schema for updating a visit; only the fields sent are changed"""

    propertyId: Optional[str] = Field(None, min_length=1)
    clientId: Optional[str] = Field(None, min_length=1)
    date: Optional[DateType] = None
    time: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    agentId: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def validate_date(cls, v):
        return _coerce_date(v)

    @field_validator("time")
    @classmethod
    def validate_time_format(cls, v):
        return validate_time(v)

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        return _check_type(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v):
        return _check_status(v)


class ConflictCheckResponse(BaseModel):
    hasConflict: bool
    conflictingVisits: int
