from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional

import pytest

from src.time_tracker.time_tracker.core.enums import Role, SessionStatus
from src.time_tracker.time_tracker.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from src.time_tracker.time_tracker.timelogs.hours.fixed_lunch import FixedLunchDeductionCalculator
from src.time_tracker.time_tracker.timelogs.model import TimeSession
from src.time_tracker.time_tracker.timelogs.service import TimeLogService


class InMemorySessions:
    """Honours the store contract: unique ACTIVE per employee, versioned writes."""

    def __init__(self):
        self._rows: dict[int, TimeSession] = {}
        self._id = 0

    def get_by_id(self, session_id: int) -> Optional[TimeSession]:
        return self._rows.get(session_id)

    def get_active_for_employee(self, employee_id: str) -> Optional[TimeSession]:
        for s in self._rows.values():
            if s.employee_id == employee_id and s.status == SessionStatus.ACTIVE:
                return s
        return None

    def insert_active(self, *, employee_id: str, login_time: datetime) -> TimeSession:
        if self.get_active_for_employee(employee_id):
            raise ConflictError("You already have an active session")
        self._id += 1
        s = TimeSession(session_id=self._id, employee_id=employee_id, login_time=login_time)
        self._rows[self._id] = s
        return s

    def save(self, session: TimeSession, *, expected_version: int) -> bool:
        stored = self._rows.get(session.session_id)
        if not stored or stored.version != expected_version:
            return False
        self._rows[session.session_id] = replace(session, version=stored.version + 1)
        return True

    def update_notes(self, session_id: int, notes: Optional[str]) -> bool:
        stored = self._rows.get(session_id)
        if not stored:
            return False
        self._rows[session_id] = replace(stored, notes=notes, version=stored.version + 1)
        return True

    def list_for_employee(self, employee_id: str, *, start_date=None, end_date=None):
        return self.list_all(start_date=start_date, end_date=end_date, employee_id=employee_id)

    def list_all(self, *, start_date=None, end_date=None, limit: int = 500, employee_id=None):
        items = [s for s in self._rows.values() if employee_id is None or s.employee_id == employee_id]
        if start_date and end_date:
            items = [s for s in items if start_date <= s.login_time.date() <= end_date]
        items.sort(key=lambda s: s.login_time, reverse=True)
        return items[:limit]

    def count_active(self, employee_id: str) -> int:
        return sum(1 for s in self._rows.values() if s.employee_id == employee_id and s.is_active)


DAY = datetime(2026, 3, 2)


def at(hour: int, minute: int = 0, *, days: int = 0) -> datetime:
    return DAY + timedelta(days=days, hours=hour, minutes=minute)


def test_clock_day_with_break_subtraction():
    repo = InMemorySessions()
    svc = TimeLogService(repo)

    svc.clock_in("EMP001", now=at(9))
    svc.start_break("EMP001", now=at(12))
    svc.end_break("EMP001", now=at(12, 30))
    s = svc.clock_out("EMP001", now=at(17))

    assert s.status == SessionStatus.COMPLETED
    assert s.total_hours == 8.0
    assert s.total_break_hours == 0.5
    assert s.net_work_hours == 7.5

    stored = repo.get_by_id(s.session_id)
    assert stored == s


def test_clock_day_with_fixed_lunch():
    svc = TimeLogService(InMemorySessions(), calculator=FixedLunchDeductionCalculator())

    svc.clock_in("EMP001", now=at(9))
    s = svc.clock_out("EMP001", now=at(13))

    assert s.total_hours == 4.0
    assert s.adjusted_hours == 4.0
    assert s.lunch_break_deducted is False
    assert s.net_work_hours is None


def test_second_clock_in_conflicts():
    repo = InMemorySessions()
    svc = TimeLogService(repo)
    svc.clock_in("EMP001", now=at(9))

    with pytest.raises(ConflictError):
        svc.clock_in("EMP001", now=at(9, 5))

    assert repo.count_active("EMP001") == 1


def test_clock_in_again_after_clock_out_is_allowed():
    repo = InMemorySessions()
    svc = TimeLogService(repo)
    svc.clock_in("EMP001", now=at(9))
    svc.clock_out("EMP001", now=at(12))
    svc.clock_in("EMP001", now=at(13))

    assert repo.count_active("EMP001") == 1
    assert len(svc.list_sessions("EMP001")) == 2


def test_clock_out_while_on_break_conflicts_and_session_stays_active():
    repo = InMemorySessions()
    svc = TimeLogService(repo)
    svc.clock_in("EMP001", now=at(9))
    svc.start_break("EMP001", now=at(12))

    with pytest.raises(ConflictError):
        svc.clock_out("EMP001", now=at(17))

    active = svc.get_active_session("EMP001")
    assert active is not None
    assert active.status == SessionStatus.ACTIVE
    assert active.active_break is not None


def test_clock_out_without_session_is_not_found():
    svc = TimeLogService(InMemorySessions())

    with pytest.raises(NotFoundError):
        svc.clock_out("EMP001", now=at(17))


def test_end_break_twice_is_not_found():
    svc = TimeLogService(InMemorySessions())
    svc.clock_in("EMP001", now=at(9))
    svc.start_break("EMP001", now=at(10))
    svc.end_break("EMP001", now=at(10, 15))

    with pytest.raises(NotFoundError):
        svc.end_break("EMP001", now=at(10, 16))


def test_only_one_break_runs_at_a_time():
    svc = TimeLogService(InMemorySessions())
    svc.clock_in("EMP001", now=at(9))
    svc.start_break("EMP001", now=at(10))

    with pytest.raises(ConflictError):
        svc.start_break("EMP001", now=at(10, 5))

    s = svc.get_active_session("EMP001")
    assert sum(1 for b in s.breaks if b.is_active) == 1


def test_break_without_session_is_not_found():
    svc = TimeLogService(InMemorySessions())

    with pytest.raises(NotFoundError):
        svc.start_break("EMP001", now=at(10))


def test_stale_write_is_rejected_as_conflict():
    class RacingSessions(InMemorySessions):
        # Another request saves between our read and our write.
        def get_active_for_employee(self, employee_id):
            s = super().get_active_for_employee(employee_id)
            if s:
                self._rows[s.session_id] = replace(s, version=s.version + 1)
            return s

    repo = RacingSessions()
    svc = TimeLogService(repo)
    svc.clock_in("EMP001", now=at(9))

    with pytest.raises(ConflictError):
        svc.start_break("EMP001", now=at(10))

    assert repo.get_active_for_employee("EMP001").breaks == ()


def test_list_sessions_filters_by_date_range_newest_first():
    svc = TimeLogService(InMemorySessions())
    for d in range(3):
        svc.clock_in("EMP001", now=at(9, days=d))
        svc.clock_out("EMP001", now=at(17, days=d))

    rows = svc.list_sessions("EMP001", start=date(2026, 3, 3), end=date(2026, 3, 4))

    assert [r.login_time.date() for r in rows] == [date(2026, 3, 4), date(2026, 3, 3)]


def test_list_sessions_rejects_inverted_range():
    svc = TimeLogService(InMemorySessions())

    with pytest.raises(ValidationError):
        svc.list_sessions("EMP001", start=date(2026, 3, 4), end=date(2026, 3, 1))


def test_admin_listing_requires_privileged_role():
    svc = TimeLogService(InMemorySessions())
    svc.clock_in("EMP001", now=at(9))
    svc.clock_in("EMP002", now=at(9))

    assert len(svc.list_all_sessions(current_role=Role.ADMIN)) == 2
    assert len(svc.list_employee_sessions(current_role="superadmin", employee_id="EMP002")) == 1

    with pytest.raises(AuthorizationError):
        svc.list_all_sessions(current_role=Role.EMPLOYEE)


def test_set_note_by_owner_and_admin():
    svc = TimeLogService(InMemorySessions())
    svc.clock_in("EMP001", now=at(9))
    s = svc.clock_out("EMP001", now=at(17))

    s = svc.set_note(s.session_id, "  onsite  ", caller_employee_id="EMP001", caller_role="employee")
    assert s.notes == "onsite"

    s = svc.set_note(s.session_id, "approved", caller_employee_id="ADM1", caller_role=Role.ADMIN)
    assert s.notes == "approved"
    assert s.total_hours == 8.0


def test_set_note_by_other_employee_is_forbidden():
    svc = TimeLogService(InMemorySessions())
    s = svc.clock_in("EMP001", now=at(9))

    with pytest.raises(AuthorizationError):
        svc.set_note(s.session_id, "hi", caller_employee_id="EMP002", caller_role=Role.EMPLOYEE)


def test_set_note_on_missing_session_is_not_found():
    svc = TimeLogService(InMemorySessions())

    with pytest.raises(NotFoundError):
        svc.set_note(42, "x", caller_employee_id="EMP001", caller_role=Role.EMPLOYEE)


def test_set_note_validates_input():
    svc = TimeLogService(InMemorySessions())
    s = svc.clock_in("EMP001", now=at(9))

    with pytest.raises(ValidationError):
        svc.set_note("abc", "x", caller_employee_id="EMP001", caller_role=Role.EMPLOYEE)
    with pytest.raises(ValidationError):
        svc.set_note(s.session_id, "x" * 1001, caller_employee_id="EMP001", caller_role=Role.EMPLOYEE)
    with pytest.raises(ValidationError):
        svc.set_note(s.session_id, "x", caller_employee_id="EMP001", caller_role="intern")


def test_get_stats_uses_completed_sessions():
    svc = TimeLogService(InMemorySessions())
    svc.clock_in("EMP001", now=at(9))
    svc.clock_out("EMP001", now=at(13))
    svc.clock_in("EMP001", now=at(14))

    stats = svc.get_stats("EMP001", now=at(15))

    assert stats.today.hours == 4.0
    assert stats.today.net == 4.0
    assert stats.total_days_worked == 1


def test_set_note_rejects_non_text_notes():
    svc = TimeLogService(InMemorySessions())
    s = svc.clock_in("EMP001", now=at(9))

    with pytest.raises(ValidationError):
        svc.set_note(s.session_id, 5, caller_employee_id="EMP001", caller_role=Role.EMPLOYEE)
    with pytest.raises(ValidationError):
        svc.set_note(s.session_id, ["x"], caller_employee_id="EMP001", caller_role="employee")
