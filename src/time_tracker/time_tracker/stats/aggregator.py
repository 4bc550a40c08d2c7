from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Iterable, Optional

from ..common.datetime_utils import minus_one_month, now_local, round_hours, start_of_day
from ..core.constants import EVENING_START_HOUR, MORNING_END_HOUR, STATS_WEEK_DAYS
from ..core.enums import HoursPolicy
from ..timelogs.model import TimeSession
from .model import BreakDistribution, StatsRecord, WindowTotals


@dataclass
class _Accumulator:
    hours: float = 0.0
    breaks: float = 0.0
    net: float = 0.0

    def add(self, session: TimeSession, policy: HoursPolicy) -> None:
        self.hours += float(session.total_hours or 0)
        self.breaks += float(session.total_break_hours or 0)
        self.net += session.worked_hours(policy)

    def freeze(self) -> WindowTotals:
        return WindowTotals(
            hours=round_hours(self.hours),
            breaks=round_hours(self.breaks),
            net=round_hours(self.net),
        )


@dataclass
class _Buckets:
    sums: dict[str, float] = field(default_factory=lambda: {"morning": 0.0, "afternoon": 0.0, "evening": 0.0})

    def add(self, start: datetime, duration: float) -> None:
        if start.hour < MORNING_END_HOUR:
            key = "morning"
        elif start.hour < EVENING_START_HOUR:
            key = "afternoon"
        else:
            key = "evening"
        self.sums[key] += float(duration or 0)

    def freeze(self) -> BreakDistribution:
        return BreakDistribution(**{k: round_hours(v) for k, v in self.sums.items()})


class StatsAggregator:
    """Summarize an employee's history into today/week/month/all-time windows.

    Pure and total: any input (including none) yields a record, never an error.
    Rounding happens once, after all sums are taken.
    """

    def __init__(self, policy: HoursPolicy = HoursPolicy.BREAK_SUBTRACTION):
        self._policy = HoursPolicy(policy)

    def aggregate(self, sessions: Iterable[TimeSession], *, now: Optional[datetime] = None) -> StatsRecord:
        now = now or now_local()
        today_start = start_of_day(now)
        week_start = today_start - timedelta(days=STATS_WEEK_DAYS)
        month_start = minus_one_month(today_start)

        today, week, month, all_time = _Accumulator(), _Accumulator(), _Accumulator(), _Accumulator()
        buckets = _Buckets()
        days_worked = set()
        sessions_with_breaks = 0

        for s in sessions:
            if s.is_active:
                continue

            all_time.add(s, self._policy)
            if s.login_time >= month_start:
                month.add(s, self._policy)
            if s.login_time >= week_start:
                week.add(s, self._policy)
            if s.login_time >= today_start:
                today.add(s, self._policy)

            days_worked.add(s.login_time.date())
            if (s.total_break_hours or 0) > 0:
                sessions_with_breaks += 1

            for b in s.completed_breaks:
                buckets.add(b.start_time, b.duration)

        total_days = len(days_worked)
        return StatsRecord(
            policy=self._policy,
            today=today.freeze(),
            week=week.freeze(),
            month=month.freeze(),
            all_time=all_time.freeze(),
            total_days_worked=total_days,
            avg_daily_hours=round_hours(all_time.net / total_days) if total_days else 0.0,
            avg_break_time=round_hours(all_time.breaks / sessions_with_breaks) if sessions_with_breaks else 0.0,
            break_distribution=buckets.freeze(),
        )
