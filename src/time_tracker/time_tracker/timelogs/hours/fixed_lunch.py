from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import hours_between, round_hours
from ...core.constants import LUNCH_DEDUCTION_HOURS, LUNCH_DEDUCTION_THRESHOLD_HOURS
from ...core.enums import HoursPolicy
from .base import HoursCalculator, HoursResult


class FixedLunchDeductionCalculator(HoursCalculator):
    """Sessions of 5h or more lose a flat 1h lunch; breaks are not tracked."""

    policy = HoursPolicy.FIXED_LUNCH_DEDUCTION
    tracks_breaks = False

    def __init__(
        self,
        *,
        threshold_hours: float = LUNCH_DEDUCTION_THRESHOLD_HOURS,
        deduction_hours: float = LUNCH_DEDUCTION_HOURS,
    ):
        self._threshold = float(threshold_hours)
        self._deduction = float(deduction_hours)

    def calculate(self, *, login_time: datetime, logout_time: datetime, total_break_hours: float) -> HoursResult:
        total = round_hours(hours_between(login_time, logout_time))
        if total >= self._threshold:
            return HoursResult(
                total_hours=total,
                adjusted_hours=round_hours(max(0.0, total - self._deduction)),
                lunch_break_deducted=True,
            )
        return HoursResult(total_hours=total, adjusted_hours=total, lunch_break_deducted=False)
