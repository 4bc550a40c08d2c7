from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from .model import TimeSession


class TimeSessionRepository(Protocol):
    """Persistence contract for clock sessions.

    Every read goes to the store; implementations must not cache the
    "current session" of an employee between calls.
    """

    def get_by_id(self, session_id: int) -> Optional[TimeSession]:
        raise NotImplementedError

    def get_active_for_employee(self, employee_id: str) -> Optional[TimeSession]:
        raise NotImplementedError

    def insert_active(self, *, employee_id: str, login_time: datetime) -> TimeSession:
        """Create an ACTIVE session.

        Must be atomic against concurrent inserts for the same employee and
        raise ``ConflictError`` when an ACTIVE session already exists.
        """

        raise NotImplementedError

    def save(self, session: TimeSession, *, expected_version: int) -> bool:
        """Compare-and-swap: persist status, hours and breaks only if the stored
        version still equals ``expected_version``. Returns False on a lost race."""

        raise NotImplementedError

    def update_notes(self, session_id: int, notes: Optional[str]) -> bool:
        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: str,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[TimeSession]:
        """Newest first; the optional range is inclusive on the login date."""

        raise NotImplementedError

    def list_all(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 500,
    ) -> Sequence[TimeSession]:
        raise NotImplementedError
