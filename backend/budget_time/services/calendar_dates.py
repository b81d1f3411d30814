from __future__ import annotations

import calendar
from datetime import MAXYEAR, MINYEAR, date, timedelta

from .errors import DateError


def _is_ascii_number(text: str) -> bool:
    return text.isascii() and text.isdigit()


def make_date(year: int, month: int, day: int) -> date:
    """Build a calendar date, raising DateError for days that do not exist."""
    try:
        return date(year, month, day)
    except (TypeError, ValueError) as exc:
        raise DateError(f"{year}-{month}-{day} is not a valid calendar date") from exc


def parse_iso_date(text: str) -> date:
    """Parse strict YYYY-MM-DD."""
    parts = text.strip().split("-")
    if len(parts) != 3:
        raise DateError(f"Expected YYYY-MM-DD, got {text!r}")

    year_text, month_text, day_text = parts
    if len(year_text) != 4 or len(month_text) != 2 or len(day_text) != 2:
        raise DateError(f"Expected YYYY-MM-DD, got {text!r}")
    if not (_is_ascii_number(year_text) and _is_ascii_number(month_text) and _is_ascii_number(day_text)):
        raise DateError(f"Expected YYYY-MM-DD, got {text!r}")

    return make_date(int(year_text), int(month_text), int(day_text))


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def clamped_date(year: int, month: int, day: int) -> date:
    # Day is clamped to the month length; month must already be valid.
    if year < MINYEAR or year > MAXYEAR:
        raise DateError(f"Year {year} is outside the supported calendar range")
    return date(year, month, min(day, days_in_month(year, month)))


def shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    absolute_index = (year * 12 + (month - 1)) + offset
    next_year, month_zero_based = divmod(absolute_index, 12)
    return next_year, month_zero_based + 1


def add_months(value: date, months: int, *, day: int | None = None) -> date:
    """Move `months` calendar months, clamping the day to the target month's end.

    `day` overrides the target day-of-month so callers can keep a fixed
    target (e.g. the 31st) across months without drifting to the clamped value.
    Raises DateError when the result falls outside years 1..9999.
    """
    year, month = shift_month(value.year, value.month, months)
    return clamped_date(year, month, value.day if day is None else day)


def add_days(value: date, days: int) -> date:
    try:
        return value + timedelta(days=days)
    except OverflowError as exc:
        raise DateError(f"{value} {days:+d} days is outside the supported calendar range") from exc


def days_between(start: date, end: date) -> int:
    """Signed whole-day difference `end - start`."""
    return (end - start).days


def iso_weekday(value: date) -> int:
    """1 = Monday .. 7 = Sunday."""
    return value.isoweekday()
