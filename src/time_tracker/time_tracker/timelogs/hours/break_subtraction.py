from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import hours_between, round_hours
from ...core.enums import HoursPolicy
from .base import HoursCalculator, HoursResult


class BreakSubtractionCalculator(HoursCalculator):
    """Net hours = elapsed hours minus the tracked break time."""

    policy = HoursPolicy.BREAK_SUBTRACTION
    tracks_breaks = True

    def calculate(self, *, login_time: datetime, logout_time: datetime, total_break_hours: float) -> HoursResult:
        total = round_hours(hours_between(login_time, logout_time))
        return HoursResult(
            total_hours=total,
            net_work_hours=round_hours(total - float(total_break_hours or 0)),
        )
