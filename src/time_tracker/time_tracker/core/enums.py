from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Caller roles as supplied by the identity provider."""

    EMPLOYEE = "employee"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"

    @property
    def is_privileged(self) -> bool:
        return self in {Role.ADMIN, Role.SUPERADMIN}


class SessionStatus(str, Enum):
    """Lifecycle state of a clock session. COMPLETED is terminal."""

    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


class BreakStatus(str, Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


class HoursPolicy(str, Enum):
    """Deployment-wide rule for turning clock timestamps into worked hours."""

    BREAK_SUBTRACTION = "break_subtraction"
    FIXED_LUNCH_DEDUCTION = "fixed_lunch_deduction"
