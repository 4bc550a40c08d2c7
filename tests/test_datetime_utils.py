from datetime import date, datetime

from src.time_tracker.time_tracker.common.datetime_utils import (
    day_bounds,
    hours_between,
    minus_one_month,
    round_hours,
    start_of_day,
)


def test_round_hours_is_half_up():
    assert round_hours(0.125) == 0.13
    assert round_hours(2.675) == 2.68
    assert round_hours(0.124) == 0.12
    assert round_hours(7) == 7.0


def test_hours_between():
    assert hours_between(datetime(2026, 1, 1, 9, 0), datetime(2026, 1, 1, 17, 30)) == 8.5


def test_minus_one_month_clamps_to_last_day():
    assert minus_one_month(datetime(2026, 3, 31)) == datetime(2026, 2, 28)
    assert minus_one_month(datetime(2024, 3, 31)) == datetime(2024, 2, 29)
    assert minus_one_month(datetime(2026, 1, 15)) == datetime(2025, 12, 15)
    assert minus_one_month(datetime(2026, 10, 17)) == datetime(2026, 9, 17)


def test_start_of_day_and_bounds():
    assert start_of_day(datetime(2026, 5, 4, 13, 45, 10)) == datetime(2026, 5, 4)
    assert day_bounds(date(2026, 5, 1), date(2026, 5, 3)) == (datetime(2026, 5, 1), datetime(2026, 5, 4))
