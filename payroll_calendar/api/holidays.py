# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Path, Query

from payroll_calendar.api.deps import AdminDep, AuthDep
from payroll_calendar.db import SessionDep
from payroll_calendar.models.enums import HolidayType
from payroll_calendar.schemas.holiday import (
    BulkCreateHolidayRequest,
    BulkCreateResult,
    CreateHolidayRequest,
    HolidayListFilters,
    HolidayListResponse,
    HolidayResponse,
    SyncResult,
    UpdateHolidayRequest,
)
from payroll_calendar.services import holiday as holiday_service
from payroll_calendar.services.holiday_sync import sync_year

holidays_router = APIRouter(
    prefix="/holidays",
    tags=["holidays"],
)


@holidays_router.get(
    "",
    response_model=HolidayListResponse,
)
async def list_holidays(
    session: SessionDep,
    auth: AuthDep,
    company_id: uuid.UUID | None = Query(default=None),
    include_global: bool = Query(default=False),
    year: int | None = Query(default=None, ge=1900, le=9999),
    month: int | None = Query(default=None, ge=1, le=12),
    type: HolidayType | None = Query(default=None),
    is_active: bool | None = Query(default=None),
    search: str | None = Query(default=None, max_length=255),
    sort_by: str = Query(default="date", pattern="^(date|name|type|created_at)$"),
    sort_order: str = Query(default="asc", pattern="^(asc|desc)$"),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=500),
) -> HolidayListResponse:
    """List holidays with optional scope, period, type and status filters."""
    filters = HolidayListFilters(
        company_id=company_id,
        include_global=include_global,
        year=year,
        month=month,
        type=type,
        is_active=is_active,
        search=search,
        sort_by=sort_by,  # type: ignore[arg-type]
        sort_order=sort_order,  # type: ignore[arg-type]
    )
    return await holiday_service.list_holidays(session, filters, offset, limit)


@holidays_router.get(
    "/calendar",
    response_model=list[HolidayResponse],
)
async def get_calendar(
    session: SessionDep,
    auth: AuthDep,
    year: int = Query(ge=1900, le=9999),
    month: int | None = Query(default=None, ge=1, le=12),
    company_id: uuid.UUID | None = Query(default=None),
) -> list[HolidayResponse]:
    """Active holidays for a year or month, global plus the company's."""
    holidays = await holiday_service.get_calendar(session, year, month, company_id)
    return [holiday_service.build_holiday_response(h) for h in holidays]


@holidays_router.get(
    "/upcoming",
    response_model=list[HolidayResponse],
)
async def get_upcoming(
    session: SessionDep,
    auth: AuthDep,
    days: int = Query(default=30, ge=0, le=366),
    company_id: uuid.UUID | None = Query(default=None),
) -> list[HolidayResponse]:
    """Active holidays within the next ``days`` days."""
    holidays = await holiday_service.get_upcoming(session, days, company_id)
    return [holiday_service.build_holiday_response(h) for h in holidays]


@holidays_router.get(
    "/{holiday_id}",
    response_model=HolidayResponse,
)
async def get_holiday(
    holiday_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> HolidayResponse:
    """Get a single holiday."""
    holiday = await holiday_service.get_holiday(session, holiday_id)
    return holiday_service.build_holiday_response(holiday)


@holidays_router.post(
    "",
    response_model=HolidayResponse,
    status_code=201,
)
async def create_holiday(
    payload: CreateHolidayRequest,
    session: SessionDep,
    auth: AdminDep,
) -> HolidayResponse:
    """Create a holiday by hand (admin only)."""
    return await holiday_service.create_holiday(session, auth, payload)


@holidays_router.put(
    "/{holiday_id}",
    response_model=HolidayResponse,
)
async def update_holiday(
    holiday_id: uuid.UUID,
    payload: UpdateHolidayRequest,
    session: SessionDep,
    auth: AdminDep,
) -> HolidayResponse:
    """Patch a holiday (admin only)."""
    return await holiday_service.update_holiday(session, auth, holiday_id, payload)


@holidays_router.delete(
    "/{holiday_id}",
    status_code=204,
)
async def delete_holiday(
    holiday_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
) -> None:
    """Delete a holiday (admin only)."""
    await holiday_service.delete_holiday(session, auth, holiday_id)


@holidays_router.post(
    "/bulk",
    response_model=BulkCreateResult,
)
async def bulk_create_holidays(
    payload: BulkCreateHolidayRequest,
    session: SessionDep,
    auth: AdminDep,
) -> BulkCreateResult:
    """Import many holidays at once, de-duplicated by date and scope (admin only)."""
    result = await holiday_service.bulk_create_holidays(
        session,
        payload.holidays,
        payload.company_id,
        skip_duplicates=payload.skip_duplicates,
        actor_id=auth.user_id,
    )
    await session.commit()
    return result


@holidays_router.post(
    "/seed/{year}",
    response_model=BulkCreateResult,
)
async def seed_holidays(
    session: SessionDep,
    auth: AdminDep,
    year: int = Path(ge=1900, le=9999),
    company_id: uuid.UUID | None = Query(default=None),
) -> BulkCreateResult:
    """Write the built-in holiday list for a year (admin only)."""
    return await holiday_service.seed_year(session, year, company_id, actor_id=auth.user_id)


@holidays_router.post(
    "/sync/{year}",
    response_model=SyncResult,
)
async def sync_holidays(
    session: SessionDep,
    auth: AdminDep,
    year: int = Path(ge=1900, le=9999),
    company_id: uuid.UUID | None = Query(default=None),
) -> SyncResult:
    """Fetch a year from the public-holiday feed and store it (admin only)."""
    return await sync_year(session, year, company_id, actor_id=auth.user_id)
