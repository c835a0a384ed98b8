# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter

from payroll_calendar.api.deps import AdminDep, AuthDep
from payroll_calendar.db import SessionDep
from payroll_calendar.schemas.calendar_settings import CalendarSettingsResponse, UpdateCalendarSettingsRequest
from payroll_calendar.services import calendar_settings as settings_service

calendar_settings_router = APIRouter(
    prefix="/companies/{company_id}/calendar-settings",
    tags=["calendar-settings"],
)


@calendar_settings_router.get(
    "",
    response_model=CalendarSettingsResponse,
)
async def get_calendar_settings(
    company_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> CalendarSettingsResponse:
    """Effective rest days and payroll cutoff for a company."""
    return await settings_service.get_calendar_settings(session, company_id)


@calendar_settings_router.put(
    "",
    response_model=CalendarSettingsResponse,
)
async def update_calendar_settings(
    company_id: uuid.UUID,
    payload: UpdateCalendarSettingsRequest,
    session: SessionDep,
    auth: AdminDep,
) -> CalendarSettingsResponse:
    """Set a company's rest days and payroll cutoff (admin only)."""
    return await settings_service.upsert_calendar_settings(session, auth, company_id, payload)
