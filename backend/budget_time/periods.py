from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, Field, field_serializer, model_validator

from .services.budget_period import BudgetPeriod, PayCadence, next_payday, resolve_period
from .services.budget_summary import summarize_period
from .services.errors import ScheduleError
from .services.expense_expansion import Expense, Occurrence, expand_all
from .services.recurrence_pattern import RecurringFrequency

# Budget period endpoints: which expenses land in the current paycheck.
router = APIRouter(prefix="/budget-period", tags=["budget-period"])


class BudgetPeriodOut(BaseModel):
    start: date
    end: date
    is_override: bool
    next_payday: date | None = None


class ExpenseIn(BaseModel):
    id: str = Field(min_length=1, max_length=80)
    name: str = Field(default="", max_length=160)
    amount: Decimal = Field(default=Decimal("0.00"), ge=Decimal("0"), max_digits=12, decimal_places=2)
    due_date: date
    is_recurring: bool = False
    recurring_frequency: RecurringFrequency | None = None
    recurring_pattern: str | None = Field(default=None, max_length=64)
    # category, notes, status, ... are passed through untouched.
    payload: dict[str, Any] = Field(default_factory=dict)


class OneTimeExpenseIn(BaseModel):
    # Ad-hoc expense for this period only; it is dated on the period start.
    id: str = Field(min_length=1, max_length=80)
    name: str = Field(default="", max_length=160)
    amount: Decimal = Field(default=Decimal("0.00"), ge=Decimal("0"), max_digits=12, decimal_places=2)
    payload: dict[str, Any] = Field(default_factory=dict)


class PeriodExpensesRequest(BaseModel):
    reference_date: date | None = None
    cadence: PayCadence | None = None
    today: date | None = None
    period_start: date | None = None
    period_end: date | None = None
    paycheck_amount: Decimal = Field(default=Decimal("0.00"), ge=Decimal("0"), max_digits=12, decimal_places=2)
    excluded_ids: list[str] = Field(default_factory=list)
    expenses: list[ExpenseIn] = Field(default_factory=list)
    one_time_expenses: list[OneTimeExpenseIn] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_ids(self) -> "PeriodExpensesRequest":
        seen: set[str] = set()
        for item in [*self.expenses, *self.one_time_expenses]:
            if item.id in seen:
                raise ValueError(f"Duplicate expense id: {item.id!r}")
            seen.add(item.id)
        return self


class OccurrenceOut(BaseModel):
    occurrence_id: str
    expense_id: str
    name: str
    amount: Decimal
    occurs_on: date
    is_generated_instance: bool
    is_excluded: bool
    payload: dict[str, Any]

    @field_serializer("amount")
    def serialize_amount(self, value: Decimal) -> str:
        return _money(value)


class ExpenseErrorOut(BaseModel):
    expense_id: str
    detail: str


class PeriodSummaryOut(BaseModel):
    paycheck_amount: Decimal
    total_included: Decimal
    total_excluded: Decimal
    remaining: Decimal

    @field_serializer("paycheck_amount", "total_included", "total_excluded", "remaining")
    def serialize_decimal(self, value: Decimal) -> str:
        return _money(value)


class PeriodExpensesResponse(BaseModel):
    period: BudgetPeriodOut
    occurrences: list[OccurrenceOut]
    errors: list[ExpenseErrorOut]
    summary: PeriodSummaryOut


def _money(value: Decimal) -> str:
    return str(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def _period_for_request(
    reference_date: date | None,
    cadence: str | None,
    today: date | None,
    period_start: date | None,
    period_end: date | None,
) -> BudgetPeriodOut:
    if (period_start is None) != (period_end is None):
        raise HTTPException(status_code=422, detail="period_start and period_end must be given together")

    has_schedule = reference_date is not None and cadence is not None
    override = (period_start, period_end) if period_start is not None else None
    if override is None and not has_schedule:
        raise HTTPException(status_code=422, detail="reference_date and cadence are required without a custom period")

    current_day = today or date.today()
    try:
        period = resolve_period(reference_date, cadence, current_day, override=override)
    except ScheduleError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    upcoming = None
    if has_schedule:
        # With a custom window this is the first regular payday after it ends.
        try:
            upcoming = next_payday(reference_date, cadence, period.end if override else current_day)
        except ScheduleError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc

    return BudgetPeriodOut(start=period.start, end=period.end, is_override=override is not None, next_payday=upcoming)


def _to_expense(item: ExpenseIn) -> Expense:
    return Expense(
        id=item.id,
        due_date=item.due_date,
        is_recurring=item.is_recurring,
        recurring_frequency=item.recurring_frequency,
        recurring_pattern=item.recurring_pattern,
        name=item.name,
        amount=item.amount,
        payload=item.payload,
    )


def _one_time_occurrence(item: OneTimeExpenseIn, period: BudgetPeriod) -> Occurrence:
    expense = Expense(id=item.id, due_date=period.start, name=item.name, amount=item.amount, payload=item.payload)
    return Occurrence(expense.id, expense.due_date, False, expense)


@router.get("", response_model=BudgetPeriodOut)
async def get_budget_period(
    reference_date: date | None = Query(default=None),
    cadence: PayCadence | None = Query(default=None),
    today: date | None = Query(default=None),
    period_start: date | None = Query(default=None),
    period_end: date | None = Query(default=None),
):
    return _period_for_request(reference_date, cadence, today, period_start, period_end)


@router.post("/expenses", response_model=PeriodExpensesResponse)
async def get_period_expenses(payload: PeriodExpensesRequest):
    period_out = _period_for_request(
        payload.reference_date,
        payload.cadence,
        payload.today,
        payload.period_start,
        payload.period_end,
    )
    period = BudgetPeriod(start=period_out.start, end=period_out.end)

    result = expand_all((_to_expense(item) for item in payload.expenses), period)
    one_time = [_one_time_occurrence(item, period) for item in payload.one_time_expenses]
    summary = summarize_period(
        result.occurrences,
        paycheck_amount=payload.paycheck_amount,
        excluded_ids=payload.excluded_ids,
        extra=one_time,
    )
    excluded_ids = {occurrence.occurrence_id for occurrence in summary.excluded}

    occurrences = [
        OccurrenceOut(
            occurrence_id=occurrence.occurrence_id,
            expense_id=occurrence.source_expense_id,
            name=occurrence.expense.name,
            amount=occurrence.expense.amount,
            occurs_on=occurrence.date,
            is_generated_instance=occurrence.is_generated_instance,
            is_excluded=occurrence.occurrence_id in excluded_ids,
            payload=dict(occurrence.expense.payload),
        )
        for occurrence in [*result.occurrences, *one_time]
    ]

    return PeriodExpensesResponse(
        period=period_out,
        occurrences=occurrences,
        errors=[
            ExpenseErrorOut(expense_id=failure.expense_id, detail=str(failure.error))
            for failure in result.errors
        ],
        summary=PeriodSummaryOut(
            paycheck_amount=summary.paycheck_amount,
            total_included=summary.total_included,
            total_excluded=summary.total_excluded,
            remaining=summary.remaining,
        ),
    )
