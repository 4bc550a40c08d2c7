from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import HoursPolicy
from ..core.exceptions import ValidationError
from .hours.base import HoursCalculator
from .hours.break_subtraction import BreakSubtractionCalculator
from .hours.fixed_lunch import FixedLunchDeductionCalculator


@dataclass
class HoursCalculatorFactory:
    """Factory Pattern: pick the deployment's hours calculator from settings."""

    def for_policy(self, policy: HoursPolicy | str) -> HoursCalculator:
        try:
            policy = HoursPolicy(policy)
        except ValueError:
            raise ValidationError(f"Unknown hours policy: {policy!r}")

        if policy == HoursPolicy.FIXED_LUNCH_DEDUCTION:
            return FixedLunchDeductionCalculator()
        return BreakSubtractionCalculator()
