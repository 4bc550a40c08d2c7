from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from ..common.datetime_utils import hours_between, round_hours
from ..core.enums import BreakStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import BreakInterval, TimeSession


class BreakTracker:
    """Append-only break list of one session.

    Only the last interval can be running, so every mutation targets
    ``session.active_break`` and never an arbitrary index.
    """

    def start_break(self, session: TimeSession, *, now: datetime) -> TimeSession:
        if not session.is_active:
            raise NotFoundError("No active session found")
        if session.active_break is not None:
            raise ConflictError("You are already on a break")
        if session.breaks and now < (session.breaks[-1].end_time or session.breaks[-1].start_time):
            raise ValidationError("Break cannot start before the previous break ended")

        return replace(session, breaks=session.breaks + (BreakInterval(start_time=now),))

    def end_break(self, session: TimeSession, *, now: datetime) -> TimeSession:
        if not session.is_active:
            raise NotFoundError("No active session found")

        current = session.active_break
        if current is None:
            raise NotFoundError("No active break found")
        if now <= current.start_time:
            raise ValidationError("Break end time must be after its start time")

        duration = round_hours(hours_between(current.start_time, now))
        finished = replace(current, end_time=now, status=BreakStatus.COMPLETED, duration=duration)

        return replace(
            session,
            breaks=session.breaks[:-1] + (finished,),
            # the running total is re-rounded, not just the increment
            total_break_hours=round_hours(session.total_break_hours + duration),
        )
