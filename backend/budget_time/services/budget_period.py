"""Pay-period windows.

A budget period is the inclusive window between two paychecks. It is either
derived from a reference paycheck date and the user's cadence, or supplied
directly as a manual override (early paydays and the like).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Literal

from ..logging_setup import get_logger
from .calendar_dates import add_days, add_months, clamped_date, days_between, days_in_month, shift_month
from .errors import PeriodError

logger = get_logger(__name__)

PayCadence = Literal["weekly", "bi-weekly", "monthly", "semi-monthly"]

FIXED_PERIOD_DAYS: dict[str, int] = {
    "weekly": 7,
    "bi-weekly": 14,
}

SEMI_MONTHLY_SPLIT_DAY = 15


@dataclass(frozen=True)
class BudgetPeriod:
    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise PeriodError(f"Period start {self.start} is after end {self.end}")

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def length_days(self) -> int:
        return days_between(self.start, self.end) + 1


def period_length_days(cadence: str) -> int:
    """Fixed length for weekly cadences; month-based cadences have none."""
    try:
        return FIXED_PERIOD_DAYS[cadence]
    except KeyError:
        raise ValueError(f"{cadence!r} periods do not have a fixed length") from None


def _fixed_length_period(reference_date: date, length: int, today: date) -> BudgetPeriod:
    # Floor division keeps the window correct when today precedes the reference.
    periods_elapsed = days_between(reference_date, today) // length
    start = add_days(reference_date, periods_elapsed * length)
    return BudgetPeriod(start=start, end=add_days(start, length - 1))


def _monthly_period(reference_date: date, today: date) -> BudgetPeriod:
    boundary_day = reference_date.day
    start = clamped_date(today.year, today.month, boundary_day)
    if today < start:
        year, month = shift_month(today.year, today.month, -1)
        start = clamped_date(year, month, boundary_day)

    next_start = add_months(start, 1, day=boundary_day)
    return BudgetPeriod(start=start, end=next_start - timedelta(days=1))


def _semi_monthly_period(today: date) -> BudgetPeriod:
    if today.day <= SEMI_MONTHLY_SPLIT_DAY:
        return BudgetPeriod(
            start=today.replace(day=1),
            end=today.replace(day=SEMI_MONTHLY_SPLIT_DAY),
        )
    return BudgetPeriod(
        start=today.replace(day=SEMI_MONTHLY_SPLIT_DAY + 1),
        end=today.replace(day=days_in_month(today.year, today.month)),
    )


def current_period(reference_date: date, cadence: str, today: date) -> BudgetPeriod:
    """Return the pay period that contains `today`."""
    if cadence in FIXED_PERIOD_DAYS:
        period = _fixed_length_period(reference_date, FIXED_PERIOD_DAYS[cadence], today)
    elif cadence == "monthly":
        period = _monthly_period(reference_date, today)
    elif cadence == "semi-monthly":
        period = _semi_monthly_period(today)
    else:
        raise ValueError(f"Unknown pay cadence: {cadence!r}")

    logger.debug("Resolved %s period %s..%s for %s", cadence, period.start, period.end, today)
    return period


def manual_period(start: date, end: date) -> BudgetPeriod:
    """Accept a caller-supplied window as-is once it is ordered."""
    return BudgetPeriod(start=start, end=end)


def resolve_period(
    reference_date: date,
    cadence: str,
    today: date,
    *,
    override: tuple[date, date] | None = None,
) -> BudgetPeriod:
    if override is not None:
        return manual_period(*override)
    return current_period(reference_date, cadence, today)


def next_payday(reference_date: date, cadence: str, after: date) -> date:
    """First regular period start strictly after `after`."""
    return add_days(current_period(reference_date, cadence, after).end, 1)
