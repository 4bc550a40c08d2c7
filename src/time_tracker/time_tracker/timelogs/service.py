from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import parse_id, parse_role, require_date_range, require_max_length, require_non_empty
from ..core.constants import DEFAULT_HISTORY_LIMIT, MAX_NOTE_LENGTH
from ..core.enums import HoursPolicy, Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..stats.aggregator import StatsAggregator
from ..stats.model import StatsRecord
from .breaks import BreakTracker
from .hours.base import HoursCalculator
from .hours.break_subtraction import BreakSubtractionCalculator
from .lifecycle import SessionLifecycle
from .model import TimeSession
from .repository import TimeSessionRepository

logger = logging.getLogger(__name__)


class TimeLogService:
    """Use cases: clock in/out, breaks, history, statistics and notes.

    Nothing is cached between calls; each operation re-reads the store and
    writes back with a conditional update.
    """

    def __init__(
        self,
        sessions: TimeSessionRepository,
        *,
        calculator: Optional[HoursCalculator] = None,
        aggregator: Optional[StatsAggregator] = None,
    ):
        self._sessions = sessions
        calculator = calculator or BreakSubtractionCalculator()
        self._lifecycle = SessionLifecycle(calculator, breaks=BreakTracker())
        self._aggregator = aggregator or StatsAggregator(calculator.policy)

    @property
    def policy(self) -> HoursPolicy:
        return self._lifecycle.calculator.policy

    def _require_active(self, employee_id: str) -> TimeSession:
        employee_id = require_non_empty(employee_id, "Employee ID")
        session = self._sessions.get_active_for_employee(employee_id)
        if not session:
            raise NotFoundError("No active session found")
        return session

    def _persist(self, before: TimeSession, after: TimeSession) -> TimeSession:
        if not self._sessions.save(after, expected_version=before.version):
            raise ConflictError("Time log was modified by another request, please retry")
        return replace(after, version=before.version + 1)

    def clock_in(self, employee_id: str, *, now: Optional[datetime] = None) -> TimeSession:
        now = now or now_local()
        draft = self._lifecycle.open(employee_id, now=now)

        # insert_active is the atomic check; a concurrent clock-in surfaces as ConflictError.
        try:
            session = self._sessions.insert_active(employee_id=draft.employee_id, login_time=draft.login_time)
        except ConflictError:
            logger.warning("Clock-in rejected: session already active", extra={"employee_id": draft.employee_id})
            raise

        logger.info("Clocked in", extra={"employee_id": session.employee_id, "session_id": session.session_id})
        return session

    def clock_out(self, employee_id: str, *, now: Optional[datetime] = None) -> TimeSession:
        now = now or now_local()
        session = self._require_active(employee_id)

        try:
            closed = self._lifecycle.close(session, now=now)
        except ConflictError:
            logger.warning("Clock-out rejected: break still running", extra={"session_id": session.session_id})
            raise

        saved = self._persist(session, closed)
        logger.info(
            "Clocked out after %.2fh", saved.total_hours,
            extra={"employee_id": saved.employee_id, "session_id": saved.session_id},
        )
        return saved

    def start_break(self, employee_id: str, *, now: Optional[datetime] = None) -> TimeSession:
        now = now or now_local()
        session = self._require_active(employee_id)
        saved = self._persist(session, self._lifecycle.start_break(session, now=now))
        logger.info("Break started", extra={"employee_id": saved.employee_id, "session_id": saved.session_id})
        return saved

    def end_break(self, employee_id: str, *, now: Optional[datetime] = None) -> TimeSession:
        now = now or now_local()
        session = self._require_active(employee_id)
        saved = self._persist(session, self._lifecycle.end_break(session, now=now))
        logger.info(
            "Break ended after %.2fh", saved.breaks[-1].duration,
            extra={"employee_id": saved.employee_id, "session_id": saved.session_id},
        )
        return saved

    def get_active_session(self, employee_id: str) -> Optional[TimeSession]:
        employee_id = require_non_empty(employee_id, "Employee ID")
        return self._sessions.get_active_for_employee(employee_id)

    def list_sessions(
        self,
        employee_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[TimeSession]:
        employee_id = require_non_empty(employee_id, "Employee ID")
        require_date_range(start, end)
        return self._sessions.list_for_employee(employee_id, start_date=start, end_date=end)

    def list_employee_sessions(
        self,
        *,
        current_role: Role | str,
        employee_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[TimeSession]:
        if not parse_role(current_role).is_privileged:
            raise AuthorizationError("Not authorized as an admin")
        return self.list_sessions(employee_id, start=start, end=end)

    def list_all_sessions(
        self,
        *,
        current_role: Role | str,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> Sequence[TimeSession]:
        if not parse_role(current_role).is_privileged:
            raise AuthorizationError("Not authorized as an admin")
        require_date_range(start, end)
        return self._sessions.list_all(start_date=start, end_date=end, limit=limit)

    def get_stats(self, employee_id: str, *, now: Optional[datetime] = None) -> StatsRecord:
        employee_id = require_non_empty(employee_id, "Employee ID")
        return self._aggregator.aggregate(self._sessions.list_for_employee(employee_id), now=now)

    def set_note(
        self,
        session_id: int,
        note: Optional[str],
        *,
        caller_employee_id: str,
        caller_role: Role | str,
    ) -> TimeSession:
        role = parse_role(caller_role)
        if note is not None and not isinstance(note, str):
            raise ValidationError("Notes must be text")
        note =require_max_length((note or "").strip() or None, "Notes", MAX_NOTE_LENGTH)

        session = self._sessions.get_by_id(parse_id(session_id, "Time log ID"))
        if not session:
            raise NotFoundError("Time log not found")

        updated = self._lifecycle.annotate(session, note, caller_employee_id=caller_employee_id, caller_role=role)
        if not self._sessions.update_notes(session.session_id, updated.notes):
            raise NotFoundError("Time log not found")

        logger.info("Notes updated", extra={"employee_id": caller_employee_id, "session_id": session.session_id})
        return replace(updated, version=session.version + 1)
