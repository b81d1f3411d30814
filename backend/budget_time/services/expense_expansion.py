from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from ..logging_setup import get_logger
from .budget_period import BudgetPeriod
from .errors import ScheduleError
from .occurrences import occurrences_through
from .recurrence_pattern import parse_pattern

logger = get_logger(__name__)


@dataclass(frozen=True)
class Expense:
    # Only the scheduling fields are interpreted here; the rest rides along.
    id: str
    due_date: date
    is_recurring: bool = False
    recurring_frequency: str | None = None
    recurring_pattern: str | None = None
    name: str = ""
    amount: Decimal = Decimal("0.00")
    payload: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @property
    def has_schedule(self) -> bool:
        return bool(self.is_recurring and self.recurring_frequency and self.recurring_pattern)


@dataclass(frozen=True)
class Occurrence:
    source_expense_id: str
    date: date
    is_generated_instance: bool
    expense: Expense = field(compare=False, repr=False)

    @property
    def occurrence_id(self) -> str:
        if self.is_generated_instance:
            return f"{self.source_expense_id}-{self.date.isoformat()}"
        return self.source_expense_id


@dataclass(frozen=True)
class ExpenseError:
    expense_id: str
    error: ScheduleError


@dataclass(frozen=True)
class ExpansionResult:
    occurrences: list[Occurrence]
    # One entry per failing expense, in input order; ids need not be unique.
    errors: list[ExpenseError]


def expand(expense: Expense, period: BudgetPeriod) -> list[Occurrence]:
    """Concrete occurrences of one expense inside `period`.

    Recurring expenses may appear several times; nothing earlier than the
    expense's own due date is returned. Raises PatternError when the stored
    pattern cannot be parsed.
    """
    if not expense.has_schedule:
        if period.contains(expense.due_date):
            return [Occurrence(expense.id, expense.due_date, False, expense)]
        return []

    pattern = parse_pattern(expense.recurring_frequency, expense.recurring_pattern)

    occurrences: list[Occurrence] = []
    for day in occurrences_through(expense.due_date, pattern, period.end):
        if day < expense.due_date or day < period.start:
            continue
        occurrences.append(Occurrence(expense.id, day, True, expense))
    return occurrences


def expand_all(expenses: Iterable[Expense], period: BudgetPeriod) -> ExpansionResult:
    """Expand a batch, isolating per-expense schedule failures."""
    occurrences: list[Occurrence] = []
    errors: list[ExpenseError] = []

    for expense in expenses:
        try:
            occurrences.extend(expand(expense, period))
        except ScheduleError as exc:
            logger.warning("Skipping expense %s: %s", expense.id, exc)
            errors.append(ExpenseError(expense.id, exc))

    occurrences.sort(key=lambda occurrence: (occurrence.date, occurrence.source_expense_id))
    return ExpansionResult(occurrences=occurrences, errors=errors)
