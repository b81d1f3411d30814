from __future__ import annotations


class ScheduleError(ValueError):
    """Base for every error raised by the scheduling engine."""

    kind = "schedule_error"


class PatternError(ScheduleError):
    kind = "malformed"

    def __init__(self, frequency: str | None, raw: str | None, reason: str) -> None:
        self.frequency = frequency
        self.raw = raw
        self.reason = reason
        super().__init__(f"Malformed {frequency or 'recurrence'} pattern {raw!r}: {reason}")


class DateError(ScheduleError):
    kind = "invalid"


class PeriodError(ScheduleError):
    kind = "inverted_range"
