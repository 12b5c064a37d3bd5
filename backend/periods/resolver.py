"""
PeriodResolver: maps a calendar date to its settlement bucket.

Pure and deterministic. Two strategies exist:

- BIWEEKLY (default): each month splits into [1, 15] and [16, last day].
- MONTHLY: the whole month is one bucket.

Month lengths come from the calendar module, so February is 28 or 29 days
as appropriate.
"""
from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from enum import Enum


class PeriodStrategy(str, Enum):
    BIWEEKLY = "BIWEEKLY"
    MONTHLY = "MONTHLY"


MID_MONTH_DAY = 15


@dataclass(frozen=True, slots=True)
class PeriodBoundary:
    start: date
    end: date  # inclusive

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def resolve(day: date, strategy: PeriodStrategy | str = PeriodStrategy.BIWEEKLY) -> PeriodBoundary:
    strategy = PeriodStrategy(strategy)
    last_day = days_in_month(day.year, day.month)

    if strategy is PeriodStrategy.MONTHLY:
        start_day, end_day = 1, last_day
    elif day.day <= MID_MONTH_DAY:
        start_day, end_day = 1, MID_MONTH_DAY
    else:
        start_day, end_day = MID_MONTH_DAY + 1, last_day

    return PeriodBoundary(
        start=day.replace(day=start_day),
        end=day.replace(day=end_day),
    )


__all__ = ["PeriodStrategy", "PeriodBoundary", "days_in_month", "resolve"]
