from datetime import date
from itertools import islice

import pytest

from budget_time.services.occurrences import (
    first_weekly_occurrence,
    generate_occurrences,
    horizon_end,
    iter_occurrences,
    occurrences_through,
)
from budget_time.services.recurrence_pattern import (
    BiWeeklyPattern,
    MonthlyPattern,
    WeeklyPattern,
    YearlyPattern,
)


def test_weekly_anchor_already_on_target_day_is_first_occurrence() -> None:
    # 2024-07-02 is a Tuesday; it must not be pushed to the following week.
    pattern = WeeklyPattern(day_of_week=2, anchor=date(2024, 7, 2))

    dates = generate_occurrences(date(2024, 7, 2), pattern, today=date(2024, 7, 1), horizon_months=1)

    assert dates == [
        date(2024, 7, 2),
        date(2024, 7, 9),
        date(2024, 7, 16),
        date(2024, 7, 23),
        date(2024, 7, 30),
    ]


@pytest.mark.parametrize("day_of_week", range(1, 8))
def test_weekly_first_occurrence_matches_when_start_is_target(day_of_week) -> None:
    # 2024-01-01 is a Monday.
    start = date(2024, 1, day_of_week)
    assert first_weekly_occurrence(start, day_of_week) == start


def test_weekly_advances_forward_to_next_matching_weekday() -> None:
    assert first_weekly_occurrence(date(2024, 1, 1), 4) == date(2024, 1, 4)
    assert first_weekly_occurrence(date(2024, 1, 10), 1) == date(2024, 1, 15)
    assert first_weekly_occurrence(date(2024, 1, 10), 2) == date(2024, 1, 16)


def test_weekly_without_anchor_uses_due_date() -> None:
    pattern = WeeklyPattern(day_of_week=4)

    dates = occurrences_through(date(2024, 1, 1), pattern, date(2024, 1, 31))

    assert dates == [date(2024, 1, 4), date(2024, 1, 11), date(2024, 1, 18), date(2024, 1, 25)]


def test_biweekly_steps_fourteen_days_from_pattern_anchor() -> None:
    pattern = BiWeeklyPattern(anchor=date(2024, 1, 15))

    dates = generate_occurrences(date(2024, 1, 1), pattern, today=date(2024, 1, 1), horizon_months=1)

    assert dates == [date(2024, 1, 15), date(2024, 1, 29)]


def test_monthly_day_31_clamps_in_february_and_returns_to_31() -> None:
    pattern = MonthlyPattern(day_of_month=31)

    leap = occurrences_through(date(2024, 1, 31), pattern, date(2024, 5, 1))
    common = occurrences_through(date(2025, 1, 31), pattern, date(2025, 4, 1))

    assert leap == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31), date(2024, 4, 30)]
    assert common == [date(2025, 1, 31), date(2025, 2, 28), date(2025, 3, 31)]


def test_monthly_starts_in_anchor_month_even_before_anchor_day() -> None:
    pattern = MonthlyPattern(day_of_month=15)

    dates = occurrences_through(date(2024, 1, 20), pattern, date(2024, 3, 31))

    # The caller is responsible for dropping January 15th.
    assert dates == [date(2024, 1, 15), date(2024, 2, 15), date(2024, 3, 15)]


def test_yearly_feb_29_clamps_in_common_years_only() -> None:
    pattern = YearlyPattern(month=2, day=29)

    dates = generate_occurrences(date(2024, 2, 29), pattern, today=date(2024, 1, 1), horizon_months=60)

    assert dates == [
        date(2024, 2, 29),
        date(2025, 2, 28),
        date(2026, 2, 28),
        date(2027, 2, 28),
        date(2028, 2, 29),
    ]


def test_horizon_is_inclusive_and_zero_horizon_stops_at_today() -> None:
    pattern = MonthlyPattern(day_of_month=10)

    assert generate_occurrences(date(2024, 1, 1), pattern, today=date(2024, 1, 10), horizon_months=0) == [
        date(2024, 1, 10)
    ]
    assert generate_occurrences(date(2024, 1, 1), pattern, today=date(2024, 1, 9), horizon_months=0) == []


def test_negative_horizon_rejected() -> None:
    with pytest.raises(ValueError):
        generate_occurrences(date(2024, 1, 1), MonthlyPattern(day_of_month=1), today=date(2024, 1, 1), horizon_months=-1)


@pytest.mark.parametrize(
    "pattern",
    [
        WeeklyPattern(day_of_week=5),
        WeeklyPattern(day_of_week=1, anchor=date(2023, 12, 25)),
        BiWeeklyPattern(anchor=date(2024, 1, 15)),
        MonthlyPattern(day_of_month=31),
        MonthlyPattern(day_of_month=29),
        YearlyPattern(month=2, day=29),
        YearlyPattern(month=12, day=31),
    ],
)
def test_generated_sequences_are_strictly_ascending_and_restartable(pattern) -> None:
    first = generate_occurrences(date(2024, 1, 31), pattern, today=date(2024, 3, 1), horizon_months=36)
    second = generate_occurrences(date(2024, 1, 31), pattern, today=date(2024, 3, 1), horizon_months=36)

    assert first == second
    assert first
    assert all(earlier < later for earlier, later in zip(first, first[1:]))


def test_iter_occurrences_is_lazy_and_unbounded() -> None:
    dates = list(islice(iter_occurrences(date(2024, 1, 1), YearlyPattern(month=1, day=1)), 3))
    assert dates == [date(2024, 1, 1), date(2025, 1, 1), date(2026, 1, 1)]


@pytest.mark.parametrize(
    ("anchor", "pattern", "expected"),
    [
        (date(9999, 12, 17), WeeklyPattern(day_of_week=5), [date(9999, 12, 17), date(9999, 12, 24), date(9999, 12, 31)]),
        (date(9999, 12, 28), WeeklyPattern(day_of_week=1), []),
        (date(9999, 1, 1), BiWeeklyPattern(anchor=date(9999, 12, 1)), [date(9999, 12, 1), date(9999, 12, 15), date(9999, 12, 29)]),
        (date(9999, 11, 1), MonthlyPattern(day_of_month=31), [date(9999, 11, 30), date(9999, 12, 31)]),
        (date(9998, 1, 1), YearlyPattern(month=12, day=31), [date(9998, 12, 31), date(9999, 12, 31)]),
    ],
)
def test_sequences_end_at_the_last_calendar_day(anchor, pattern, expected) -> None:
    assert list(iter_occurrences(anchor, pattern)) == expected
    assert occurrences_through(anchor, pattern, date.max) == expected


def test_horizon_past_the_calendar_is_capped() -> None:
    assert horizon_end(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert horizon_end(date(9999, 6, 1), 12) == date.max

    dates = generate_occurrences(date(9999, 5, 1), MonthlyPattern(day_of_month=5), today=date(9999, 6, 1), horizon_months=12)

    assert dates[0] == date(9999, 5, 5)
    assert dates[-1] == date(9999, 12, 5)
    assert len(dates) == 8
