from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import BreakStatus, HoursPolicy, SessionStatus


@dataclass(frozen=True)
class BreakInterval:
    """Domain entity: one pause inside a clock session (owned by the session)."""

    start_time: datetime
    end_time: Optional[datetime] = None
    status: BreakStatus = BreakStatus.ACTIVE
    duration: float = 0.0

    @property
    def is_active(self) -> bool:
        return self.status == BreakStatus.ACTIVE


@dataclass(frozen=True)
class TimeSession:
    """Domain entity: one employee's clock-in to clock-out record.

    Only one of ``net_work_hours`` / ``adjusted_hours`` is ever populated,
    depending on the hours policy the deployment runs with.
    """

    session_id: int
    employee_id: str
    login_time: datetime
    logout_time: Optional[datetime] = None
    status: SessionStatus = SessionStatus.ACTIVE
    breaks: tuple[BreakInterval, ...] = field(default_factory=tuple)
    total_break_hours: float = 0.0
    total_hours: float = 0.0
    net_work_hours: Optional[float] = None
    adjusted_hours: Optional[float] = None
    lunch_break_deducted: bool = False
    notes: Optional[str] = None
    version: int = 0

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE

    @property
    def active_break(self) -> Optional[BreakInterval]:
        # Only the last entry may still be running.
        if self.breaks and self.breaks[-1].is_active:
            return self.breaks[-1]
        return None

    @property
    def completed_breaks(self) -> tuple[BreakInterval, ...]:
        return tuple(b for b in self.breaks if b.status == BreakStatus.COMPLETED)

    def worked_hours(self, policy: HoursPolicy) -> float:
        """The policy's "real work time" field, 0 when it was never populated."""
        value = self.net_work_hours if policy == HoursPolicy.BREAK_SUBTRACTION else self.adjusted_hours
        return float(value or 0.0)
