from __future__ import annotations

from collections.abc import Iterator
from datetime import MAXYEAR, date, timedelta
from itertools import takewhile

from ..logging_setup import get_logger
from .calendar_dates import add_days, add_months, clamped_date, iso_weekday, shift_month
from .errors import DateError
from .recurrence_pattern import (
    BiWeeklyPattern,
    MonthlyPattern,
    RecurrencePattern,
    WeeklyPattern,
    YearlyPattern,
)

logger = get_logger(__name__)

DEFAULT_HORIZON_MONTHS = 12

WEEK = timedelta(days=7)
TWO_WEEKS = timedelta(days=14)


def first_weekly_occurrence(start: date, day_of_week: int) -> date:
    # Forward only: a start already on the target weekday is its own first occurrence.
    offset = (day_of_week - iso_weekday(start)) % 7
    return add_days(start, offset)


def horizon_end(today: date, horizon_months: int) -> date:
    """Last day covered by a horizon, capped at the end of the calendar."""
    if horizon_months < 0:
        raise ValueError("horizon_months cannot be negative")
    try:
        return add_months(today, horizon_months)
    except DateError:
        return date.max


# Every sequence below ends quietly at date.max instead of overflowing.
def _step_days(first: date, step: timedelta) -> Iterator[date]:
    current = first
    while True:
        yield current
        if date.max - current < step:
            return
        current = current + step


def _iter_weekly(anchor_due_date: date, pattern: WeeklyPattern) -> Iterator[date]:
    start = pattern.anchor if pattern.anchor is not None else anchor_due_date
    try:
        first = first_weekly_occurrence(start, pattern.day_of_week)
    except DateError:
        return
    yield from _step_days(first, WEEK)


def _iter_monthly(anchor_due_date: date, pattern: MonthlyPattern) -> Iterator[date]:
    year, month = anchor_due_date.year, anchor_due_date.month
    while year <= MAXYEAR:
        yield clamped_date(year, month, pattern.day_of_month)
        year, month = shift_month(year, month, 1)


def _iter_yearly(anchor_due_date: date, pattern: YearlyPattern) -> Iterator[date]:
    for year in range(anchor_due_date.year, MAXYEAR + 1):
        yield clamped_date(year, pattern.month, pattern.day)


def iter_occurrences(anchor_due_date: date, pattern: RecurrencePattern) -> Iterator[date]:
    """Lazy, strictly ascending occurrences of `pattern`, ending at date.max.

    Month and year alignment can yield dates before `anchor_due_date`;
    callers that care drop those themselves.
    """
    if isinstance(pattern, WeeklyPattern):
        return _iter_weekly(anchor_due_date, pattern)
    if isinstance(pattern, BiWeeklyPattern):
        return _step_days(pattern.anchor, TWO_WEEKS)
    if isinstance(pattern, MonthlyPattern):
        return _iter_monthly(anchor_due_date, pattern)
    if isinstance(pattern, YearlyPattern):
        return _iter_yearly(anchor_due_date, pattern)
    raise TypeError(f"Unsupported recurrence pattern: {pattern!r}")


def occurrences_through(anchor_due_date: date, pattern: RecurrencePattern, until: date) -> list[date]:
    """All occurrences up to and including `until`."""
    dates = list(takewhile(lambda day: day <= until, iter_occurrences(anchor_due_date, pattern)))
    logger.debug(
        "Generated %d %s occurrence(s) for anchor %s through %s",
        len(dates),
        pattern.frequency,
        anchor_due_date,
        until,
    )
    return dates


def generate_occurrences(
    anchor_due_date: date,
    pattern: RecurrencePattern,
    *,
    today: date,
    horizon_months: int = DEFAULT_HORIZON_MONTHS,
) -> list[date]:
    """Occurrences from the anchor up to `today + horizon_months` (inclusive)."""
    return occurrences_through(anchor_due_date, pattern, horizon_end(today, horizon_months))
