"""Shared validation utilities"""

import re
from datetime import date, datetime
from typing import Optional

from fastapi import HTTPException

# Accepts 9:05 as well as 09:05; stored values are always zero-padded
TIME_PATTERN = re.compile(r"^([0-1]?[0-9]|2[0-3]):([0-5][0-9])$")


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_time(value: Optional[str]) -> Optional[str]:
    """
    Validate a 24h HH:MM time and normalize it to two-digit hours.

    Raises:
        ValueError: If the value is not a valid HH:MM time
    """
    if value is None:
        return value

    match = TIME_PATTERN.match(value.strip())
    if not match:
        raise ValueError("Invalid time format (HH:MM)")

    hours, minutes = match.groups()
    return f"{int(hours):02d}:{minutes}"


def parse_date(value: str) -> date:
    """Parse YYYY-MM-DD or a full ISO-8601 timestamp into a calendar day"""
    value = value.strip()
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass

    # Full timestamps, including a trailing Z
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError as e:
        raise ValueError(f"Invalid date: {value}") from e


def parse_date_param(value: Optional[str], field: str, required: bool = False) -> Optional[date]:
    """
    Parse a query string date, raising 400 with the offending field name.

    An empty value (`?date=`) counts as missing; required parameters reject it.
    """
    if value is None or not value.strip():
        if required:
            raise HTTPException(status_code=400, detail=f"{field} must be a valid date")
        return None
    try:
        return parse_date(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"{field} must be a valid date")
