from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from .expense_expansion import Occurrence

MONEY_QUANT = Decimal("0.01")


def quantize_amount(value: Decimal) -> Decimal:
    return value.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PeriodSummary:
    paycheck_amount: Decimal
    total_included: Decimal
    total_excluded: Decimal
    remaining: Decimal
    included: list[Occurrence]
    excluded: list[Occurrence]


def summarize_period(
    occurrences: Iterable[Occurrence],
    *,
    paycheck_amount: Decimal = Decimal("0.00"),
    excluded_ids: Iterable[str] = (),
    extra: Iterable[Occurrence] = (),
) -> PeriodSummary:
    """Split a period's occurrences into counted and excluded, then total them.

    `extra` holds one-off expenses entered for this period only. Exclusion is
    keyed on `Occurrence.occurrence_id` so a single instance of a recurring
    expense can be left out.
    """
    excluded_set = set(excluded_ids)
    included: list[Occurrence] = []
    excluded: list[Occurrence] = []

    for occurrence in [*occurrences, *extra]:
        if occurrence.occurrence_id in excluded_set:
            excluded.append(occurrence)
        else:
            included.append(occurrence)

    total_included = quantize_amount(sum((o.expense.amount for o in included), Decimal("0.00")))
    total_excluded = quantize_amount(sum((o.expense.amount for o in excluded), Decimal("0.00")))
    paycheck = quantize_amount(paycheck_amount)

    return PeriodSummary(
        paycheck_amount=paycheck,
        total_included=total_included,
        total_excluded=total_excluded,
        remaining=paycheck - total_included,
        included=included,
        excluded=excluded,
    )
