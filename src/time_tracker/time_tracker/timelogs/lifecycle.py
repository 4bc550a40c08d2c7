from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

from ..common.validators import require_non_empty
from ..core.enums import Role, SessionStatus
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from .breaks import BreakTracker
from .hours.base import HoursCalculator
from .model import TimeSession


class SessionLifecycle:
    """State machine of a clock session: ACTIVE -> COMPLETED, nothing else.

    Transitions are pure: they take a session and return the next one. The
    service persists the result with a conditional write.
    """

    def __init__(self, calculator: HoursCalculator, *, breaks: Optional[BreakTracker] = None):
        self._calculator = calculator
        self._breaks = breaks or BreakTracker()

    @property
    def calculator(self) -> HoursCalculator:
        return self._calculator

    def open(self, employee_id: str, *, now: datetime) -> TimeSession:
        employee_id = require_non_empty(employee_id, "Employee ID")
        return TimeSession(session_id=0, employee_id=employee_id, login_time=now)

    def close(self, session: TimeSession, *, now: datetime) -> TimeSession:
        if not session.is_active:
            raise NotFoundError("No active session found")
        if self._calculator.tracks_breaks and session.active_break is not None:
            raise ConflictError("Please end your break before logging out")
        if now < session.login_time:
            raise ValidationError("Logout time cannot be before login time")

        result = self._calculator.calculate(
            login_time=session.login_time,
            logout_time=now,
            total_break_hours=session.total_break_hours,
        )
        return replace(
            session,
            logout_time=now,
            status=SessionStatus.COMPLETED,
            total_hours=result.total_hours,
            net_work_hours=result.net_work_hours,
            adjusted_hours=result.adjusted_hours,
            lunch_break_deducted=result.lunch_break_deducted,
        )

    def start_break(self, session: TimeSession, *, now: datetime) -> TimeSession:
        self._require_break_tracking()
        return self._breaks.start_break(session, now=now)

    def end_break(self, session: TimeSession, *, now: datetime) -> TimeSession:
        self._require_break_tracking()
        return self._breaks.end_break(session, now=now)

    @staticmethod
    def can_edit_notes(session: TimeSession, *, caller_employee_id: str, caller_role: Role) -> bool:
        return caller_role.is_privileged or session.employee_id == caller_employee_id

    def annotate(
        self,
        session: TimeSession,
        note: Optional[str],
        *,
        caller_employee_id: str,
        caller_role: Role,
    ) -> TimeSession:
        """Notes are the only field editable after completion; hours never are."""
        if not self.can_edit_notes(session, caller_employee_id=caller_employee_id, caller_role=caller_role):
            raise AuthorizationError("Not authorized to edit notes on this time log")
        return replace(session, notes=note)

    def _require_break_tracking(self) -> None:
        if not self._calculator.tracks_breaks:
            raise ValidationError("Break tracking is disabled under the fixed lunch deduction policy")
