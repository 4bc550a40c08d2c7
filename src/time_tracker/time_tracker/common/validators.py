from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_max_length(value: Optional[str], field_name: str, max_len: int) -> Optional[str]:
    if value is not None and len(value) > max_len:
        raise ValidationError(f"{field_name} must be at most {max_len} characters")
    return value


def require_date_range(start: Optional[date], end: Optional[date]) -> None:
    if (start is None) != (end is None):
        raise ValidationError("Please provide start and end dates")
    if start is not None and end is not None and end < start:
        raise ValidationError("End date must be on or after start date")


def parse_role(value: object) -> Role:
    if isinstance(value, Role):
        return value
    try:
        return Role(str(value).lower())
    except ValueError:
        raise ValidationError(f"Unknown role: {value!r}")


def parse_id(value: object, field_name: str) -> int:
    try:
        parsed = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is not a valid id")
    if parsed <= 0:
        raise ValidationError(f"{field_name} is not a valid id")
    return parsed
