# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query

from payroll_calendar.api.deps import AuthDep
from payroll_calendar.db import SessionDep
from payroll_calendar.schemas.working_days import WorkingDayPeriod, WorkingDayYearResponse
from payroll_calendar.services import holiday as holiday_service
from payroll_calendar.services.calendar_settings import get_calendar_settings, rest_day_pattern
from payroll_calendar.services.working_days import (
    calculate_month,
    calculate_payroll_period,
    calculate_year,
    month_bounds,
    payroll_period_bounds,
)

working_days_router = APIRouter(
    prefix="/working-days",
    tags=["working-days"],
)


@working_days_router.get(
    "/month",
    response_model=WorkingDayPeriod,
)
async def get_month(
    session: SessionDep,
    auth: AuthDep,
    year: int = Query(ge=1900, le=9999),
    month: int = Query(ge=1, le=12),
    company_id: uuid.UUID | None = Query(default=None),
) -> WorkingDayPeriod:
    """Working days of a calendar month using the company's rest days."""
    settings = await get_calendar_settings(session, company_id)
    start, end = month_bounds(year, month)
    holidays = await holiday_service.get_holidays_between(session, start, end, company_id)
    return calculate_month(year, month, holidays, rest_day_pattern(settings), company_id)


@working_days_router.get(
    "/payroll-period",
    response_model=WorkingDayPeriod,
)
async def get_payroll_period(
    session: SessionDep,
    auth: AuthDep,
    year: int = Query(ge=1900, le=9999),
    month: int = Query(ge=1, le=12),
    company_id: uuid.UUID | None = Query(default=None),
    cutoff_day: int | None = Query(default=None, ge=1, le=31),
) -> WorkingDayPeriod:
    """Working days of the payroll period ending in ``month``.

    The cutoff defaults to the company's configured payroll cutoff.
    """
    settings = await get_calendar_settings(session, company_id)
    cutoff = cutoff_day or settings.payroll_cutoff_day
    start, end = payroll_period_bounds(year, month, cutoff)
    holidays = await holiday_service.get_holidays_between(session, start, end, company_id)
    return calculate_payroll_period(year, month, holidays, cutoff, rest_day_pattern(settings), company_id)


@working_days_router.get(
    "/year",
    response_model=WorkingDayYearResponse,
)
async def get_year(
    session: SessionDep,
    auth: AuthDep,
    year: int = Query(ge=1900, le=9999),
    company_id: uuid.UUID | None = Query(default=None),
    payroll_periods: bool = Query(default=True),
    cutoff_day: int | None = Query(default=None, ge=1, le=31),
) -> WorkingDayYearResponse:
    """Twelve payroll periods (or calendar months) of a year."""
    settings = await get_calendar_settings(session, company_id)
    cutoff = (cutoff_day or settings.payroll_cutoff_day) if payroll_periods else None
    start = payroll_period_bounds(year, 1, cutoff)[0] if cutoff is not None else month_bounds(year, 1)[0]
    end = payroll_period_bounds(year, 12, cutoff)[1] if cutoff is not None else month_bounds(year, 12)[1]
    holidays = await holiday_service.get_holidays_between(session, start, end, company_id)
    rest_days = rest_day_pattern(settings)
    return WorkingDayYearResponse(
        year=year,
        cutoff_day=cutoff,
        rest_days=rest_days.as_list(),
        periods=calculate_year(year, holidays, rest_days, cutoff, company_id),
    )
