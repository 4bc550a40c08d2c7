from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal

from ..core.constants import HOURS_PRECISION


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def round_hours(value: float) -> float:
    """Round half-up to HOURS_PRECISION decimals (0.125 -> 0.13, not 0.12)."""
    quantum = Decimal(1).scaleb(-HOURS_PRECISION)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def hours_between(start: datetime, end: datetime) -> float:
    """Raw elapsed hours, unrounded."""
    return (end - start).total_seconds() / 3600


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min)


def minus_one_month(moment: datetime) -> datetime:
    """Same day-of-month one month earlier, clamped to the last valid day."""
    year, month = (moment.year, moment.month - 1) if moment.month > 1 else (moment.year - 1, 12)
    last_day = calendar.monthrange(year, month)[1]
    return moment.replace(year=year, month=month, day=min(moment.day, last_day))


def day_bounds(start: date, end: date) -> tuple[datetime, datetime]:
    """Half-open datetime range covering the whole of [start, end]."""
    return datetime.combine(start, time.min), datetime.combine(end + timedelta(days=1), time.min)
