from datetime import date

import pytest

from budget_time.services.calendar_dates import (
    add_days,
    add_months,
    clamped_date,
    days_between,
    iso_weekday,
    make_date,
    parse_iso_date,
)
from budget_time.services.errors import DateError


def test_make_date_rejects_non_existent_days() -> None:
    assert make_date(2024, 2, 29) == date(2024, 2, 29)
    with pytest.raises(DateError):
        make_date(2023, 2, 29)
    with pytest.raises(DateError):
        make_date(2024, 4, 31)
    with pytest.raises(DateError):
        make_date(2024, 1, 0)


def test_parse_iso_date_is_strict() -> None:
    assert parse_iso_date("2024-01-15") == date(2024, 1, 15)
    assert parse_iso_date(" 2024-01-15 ") == date(2024, 1, 15)
    for bad in ("2024-1-15", "2024/01/15", "24-01-15", "2024-02-30", "", "2024-01-15T00:00"):
        with pytest.raises(DateError):
            parse_iso_date(bad)


def test_add_months_clamps_to_month_end() -> None:
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
    assert add_months(date(2024, 12, 15), 1) == date(2025, 1, 15)
    assert add_months(date(2024, 1, 15), -1) == date(2023, 12, 15)


def test_add_months_with_fixed_target_day_does_not_drift() -> None:
    february = add_months(date(2024, 1, 31), 1)
    assert february == date(2024, 2, 29)
    # Stepping from the clamped value with the original target returns to the 31st.
    assert add_months(february, 1, day=31) == date(2024, 3, 31)


def test_day_arithmetic_and_weekday() -> None:
    assert add_days(date(2024, 2, 28), 1) == date(2024, 2, 29)
    assert days_between(date(2024, 1, 10), date(2024, 1, 1)) == -9
    assert iso_weekday(date(2024, 1, 1)) == 1
    assert iso_weekday(date(2026, 10, 18)) == 7
    assert clamped_date(2025, 2, 29) == date(2025, 2, 28)


def test_parse_iso_date_accepts_ascii_digits_only() -> None:
    for bad in ("²024-01-15", "2024-0١-15", "2024-01-１5"):
        with pytest.raises(DateError):
            parse_iso_date(bad)


def test_arithmetic_past_the_last_calendar_day_raises_date_error() -> None:
    with pytest.raises(DateError):
        add_days(date.max, 1)
    with pytest.raises(DateError):
        add_days(date.min, -1)
    with pytest.raises(DateError):
        add_months(date(9999, 12, 1), 1)
    with pytest.raises(DateError):
        clamped_date(10000, 1, 1)
    assert add_months(date(9999, 11, 30), 1, day=31) == date.max
