# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel


class PeriodHoliday(BaseModel):
    """A holiday that falls inside a computed period."""

    id: uuid.UUID | None = None
    name: str
    date: str
    type: str | None = None
    company_id: uuid.UUID | None = None


class WorkingDayPeriod(BaseModel):
    """Working-day counts for a calendar month or payroll period."""

    year: int
    month: int
    month_label: str
    period_start: str
    period_end: str
    total_days: int
    working_days: int
    holiday_count: int
    actual_working_days: int
    holidays: list[PeriodHoliday]


class WorkingDayYearResponse(BaseModel):
    """Twelve consecutive periods of a year."""

    year: int
    cutoff_day: int | None
    rest_days: list[int]
    periods: list[WorkingDayPeriod]
