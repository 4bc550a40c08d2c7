from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import HoursPolicy


@dataclass(frozen=True)
class HoursResult:
    total_hours: float
    net_work_hours: Optional[float] = None
    adjusted_hours: Optional[float] = None
    lunch_break_deducted: bool = False


class HoursCalculator(ABC):
    """Strategy Pattern: how raw clock timestamps become worked hours."""

    policy: HoursPolicy
    tracks_breaks: bool = True

    @abstractmethod
    def calculate(self, *, login_time: datetime, logout_time: datetime, total_break_hours: float) -> HoursResult:
        raise NotImplementedError
