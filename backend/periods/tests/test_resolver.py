from datetime import date, timedelta

import pytest

from periods.resolver import PeriodBoundary, PeriodStrategy, days_in_month, resolve


@pytest.mark.parametrize("day, start, end", [
    (date(2024, 3, 1), date(2024, 3, 1), date(2024, 3, 15)),
    (date(2024, 3, 15), date(2024, 3, 1), date(2024, 3, 15)),
    (date(2024, 3, 16), date(2024, 3, 16), date(2024, 3, 31)),
    (date(2024, 4, 30), date(2024, 4, 16), date(2024, 4, 30)),
    (date(2024, 2, 20), date(2024, 2, 16), date(2024, 2, 29)),  # leap year
    (date(2023, 2, 20), date(2023, 2, 16), date(2023, 2, 28)),
    (date(2023, 12, 31), date(2023, 12, 16), date(2023, 12, 31)),
])
def test_biweekly_buckets(day, start, end):
    assert resolve(day) == PeriodBoundary(start, end)


@pytest.mark.parametrize("day, start, end", [
    (date(2024, 2, 3), date(2024, 2, 1), date(2024, 2, 29)),
    (date(2023, 2, 28), date(2023, 2, 1), date(2023, 2, 28)),
    (date(2024, 7, 16), date(2024, 7, 1), date(2024, 7, 31)),
])
def test_monthly_buckets(day, start, end):
    assert resolve(day, PeriodStrategy.MONTHLY) == PeriodBoundary(start, end)


def test_strategy_accepts_plain_string():
    assert resolve(date(2024, 5, 20), "MONTHLY") == resolve(date(2024, 5, 20), PeriodStrategy.MONTHLY)


def test_unknown_strategy_rejected():
    with pytest.raises(ValueError):
        resolve(date(2024, 5, 20), "WEEKLY")


@pytest.mark.parametrize("strategy", list(PeriodStrategy))
def test_every_day_of_a_leap_year_falls_inside_its_bucket(strategy):
    day = date(2024, 1, 1)
    while day.year == 2024:
        boundary = resolve(day, strategy)
        assert day in boundary
        assert boundary.start.month == boundary.end.month == day.month
        day += timedelta(days=1)


def test_days_in_month():
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2100, 2) == 28
    assert days_in_month(2000, 2) == 29
    assert days_in_month(2024, 11) == 30
