from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import HoursPolicy


@dataclass(frozen=True)
class WindowTotals:
    """Sums over the completed sessions that logged in inside one window."""

    hours: float = 0.0
    breaks: float = 0.0
    net: float = 0.0


@dataclass(frozen=True)
class BreakDistribution:
    morning: float = 0.0
    afternoon: float = 0.0
    evening: float = 0.0


@dataclass(frozen=True)
class StatsRecord:
    """Read-model returned by the statistics endpoint."""

    policy: HoursPolicy
    today: WindowTotals
    week: WindowTotals
    month: WindowTotals
    all_time: WindowTotals
    total_days_worked: int
    avg_daily_hours: float
    avg_break_time: float
    break_distribution: BreakDistribution
