"""Recurrence patterns stored on expense records.

Persisted expenses keep their schedule as a compact comma-joined string whose
shape depends on `recurring_frequency`:

    weekly     "<1-7>" or "<1-7>,<YYYY-MM-DD>"   e.g. "4,2024-01-15"
    bi-weekly  "<YYYY-MM-DD>"                     e.g. "2024-01-15"
    monthly    "<1-31>"                           e.g. "15"
    yearly     "<1-12>,<1-31>"                    e.g. "6,15"

The string is parsed once into one of the pattern dataclasses below and every
consumer works with the typed value.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Literal, Union, get_args

from .calendar_dates import days_in_month, parse_iso_date
from .errors import DateError, PatternError

RecurringFrequency = Literal["weekly", "bi-weekly", "monthly", "yearly"]

RECURRING_FREQUENCIES: tuple[str, ...] = get_args(RecurringFrequency)

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

# Any leap year works; Feb 29 is accepted at parse time.
_LEAP_REFERENCE_YEAR = 2000


@dataclass(frozen=True)
class WeeklyPattern:
    day_of_week: int  # 1=Monday .. 7=Sunday
    anchor: date | None = None

    frequency = "weekly"


@dataclass(frozen=True)
class BiWeeklyPattern:
    anchor: date

    frequency = "bi-weekly"


@dataclass(frozen=True)
class MonthlyPattern:
    day_of_month: int

    frequency = "monthly"


@dataclass(frozen=True)
class YearlyPattern:
    month: int
    day: int

    frequency = "yearly"


RecurrencePattern = Union[WeeklyPattern, BiWeeklyPattern, MonthlyPattern, YearlyPattern]


def _split_fields(frequency: str, raw: str, allowed_counts: tuple[int, ...]) -> list[str]:
    fields = [field.strip() for field in raw.split(",")]
    if len(fields) not in allowed_counts:
        expected = " or ".join(str(count) for count in allowed_counts)
        raise PatternError(frequency, raw, f"expected {expected} field(s), got {len(fields)}")
    if any(not field for field in fields):
        raise PatternError(frequency, raw, "empty field")
    return fields


def _int_field(frequency: str, raw: str, text: str, name: str, low: int, high: int) -> int:
    if not (text.isascii() and text.isdigit()):
        raise PatternError(frequency, raw, f"{name} must be a whole number")
    value = int(text)
    if value < low or value > high:
        raise PatternError(frequency, raw, f"{name} must be between {low} and {high}")
    return value


def _date_field(frequency: str, raw: str, text: str) -> date:
    try:
        return parse_iso_date(text)
    except DateError as exc:
        raise PatternError(frequency, raw, str(exc)) from exc


def parse_pattern(frequency: str, raw: str | None) -> RecurrencePattern:
    """Parse a stored pattern string for the given frequency.

    Raises PatternError for anything that does not match the wire format;
    values are never clamped or defaulted here.
    """
    if frequency not in RECURRING_FREQUENCIES:
        raise PatternError(frequency, raw, "unknown frequency")
    if raw is None or not isinstance(raw, str) or not raw.strip():
        raise PatternError(frequency, raw, "pattern is empty")

    if frequency == "weekly":
        fields = _split_fields(frequency, raw, (1, 2))
        day_of_week = _int_field(frequency, raw, fields[0], "day_of_week", 1, 7)
        anchor = _date_field(frequency, raw, fields[1]) if len(fields) == 2 else None
        return WeeklyPattern(day_of_week=day_of_week, anchor=anchor)

    if frequency == "bi-weekly":
        fields = _split_fields(frequency, raw, (1,))
        return BiWeeklyPattern(anchor=_date_field(frequency, raw, fields[0]))

    if frequency == "monthly":
        fields = _split_fields(frequency, raw, (1,))
        return MonthlyPattern(day_of_month=_int_field(frequency, raw, fields[0], "day_of_month", 1, 31))

    fields = _split_fields(frequency, raw, (2,))
    month = _int_field(frequency, raw, fields[0], "month", 1, 12)
    day = _int_field(frequency, raw, fields[1], "day", 1, days_in_month(_LEAP_REFERENCE_YEAR, month))
    return YearlyPattern(month=month, day=day)


def encode_pattern(pattern: RecurrencePattern) -> str:
    """Render the canonical wire form of a pattern."""
    if isinstance(pattern, WeeklyPattern):
        if pattern.anchor is None:
            return str(pattern.day_of_week)
        return f"{pattern.day_of_week},{pattern.anchor.isoformat()}"
    if isinstance(pattern, BiWeeklyPattern):
        return pattern.anchor.isoformat()
    if isinstance(pattern, MonthlyPattern):
        return str(pattern.day_of_month)
    if isinstance(pattern, YearlyPattern):
        return f"{pattern.month},{pattern.day}"
    raise TypeError(f"Unsupported recurrence pattern: {pattern!r}")


def ordinal_suffix(day: int) -> str:
    if 11 <= day % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def describe_pattern(pattern: RecurrencePattern) -> str:
    """Short English label for a pattern, e.g. "15th of month"."""
    if isinstance(pattern, WeeklyPattern):
        day_name = DAY_NAMES[pattern.day_of_week - 1]
        if pattern.anchor is None:
            return day_name
        return f"{day_name} starting {pattern.anchor.isoformat()}"
    if isinstance(pattern, BiWeeklyPattern):
        return f"Every other week from {pattern.anchor.isoformat()}"
    if isinstance(pattern, MonthlyPattern):
        return f"{pattern.day_of_month}{ordinal_suffix(pattern.day_of_month)} of month"
    if isinstance(pattern, YearlyPattern):
        return f"{MONTH_NAMES[pattern.month - 1]} {pattern.day}{ordinal_suffix(pattern.day)}"
    raise TypeError(f"Unsupported recurrence pattern: {pattern!r}")
