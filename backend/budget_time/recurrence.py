from datetime import date

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from .config import settings
from .services.errors import PatternError
from .services.occurrences import generate_occurrences, horizon_end
from .services.recurrence_pattern import (
    RecurringFrequency,
    describe_pattern,
    encode_pattern,
    parse_pattern,
)

router = APIRouter(prefix="/recurrence", tags=["recurrence"])


class PatternRequest(BaseModel):
    frequency: RecurringFrequency
    pattern: str = Field(max_length=64)


class PatternOut(BaseModel):
    frequency: RecurringFrequency
    pattern: str
    description: str


class OccurrencesRequest(BaseModel):
    due_date: date
    frequency: RecurringFrequency
    pattern: str = Field(max_length=64)
    today: date | None = None
    horizon_months: int | None = Field(default=None, ge=0, le=120)


class OccurrencesResponse(BaseModel):
    frequency: RecurringFrequency
    pattern: str
    horizon_end: date
    occurrences: list[date]


def _parse_or_422(frequency: str, raw: str):
    try:
        return parse_pattern(frequency, raw)
    except PatternError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@router.post("/parse", response_model=PatternOut)
async def parse_recurrence(payload: PatternRequest) -> PatternOut:
    pattern = _parse_or_422(payload.frequency, payload.pattern)
    return PatternOut(
        frequency=payload.frequency,
        pattern=encode_pattern(pattern),
        description=describe_pattern(pattern),
    )


@router.post("/occurrences", response_model=OccurrencesResponse)
async def preview_occurrences(payload: OccurrencesRequest) -> OccurrencesResponse:
    pattern = _parse_or_422(payload.frequency, payload.pattern)

    # The server clock is read here only; the engine always gets an explicit date.
    today = payload.today or date.today()
    horizon = payload.horizon_months
    if horizon is None:
        horizon = settings.default_horizon_months

    dates = generate_occurrences(payload.due_date, pattern, today=today, horizon_months=horizon)

    # Calendar view: nothing before the expense's first due date.
    return OccurrencesResponse(
        frequency=payload.frequency,
        pattern=encode_pattern(pattern),
        horizon_end=horizon_end(today, horizon),
        occurrences=[day for day in dates if day >= payload.due_date],
    )
