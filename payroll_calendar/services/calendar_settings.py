# ruff: noqa: TC003
from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from payroll_calendar.config import get_settings
from payroll_calendar.models.calendar_settings import CompanyCalendarSettings
from payroll_calendar.models.enums import AuditAction
from payroll_calendar.schemas.calendar_settings import CalendarSettingsResponse
from payroll_calendar.services.audit import record_audit, snapshot
from payroll_calendar.services.working_days import RestDayPattern

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from payroll_calendar.schemas.auth import AuthContext
    from payroll_calendar.schemas.calendar_settings import UpdateCalendarSettingsRequest


async def _get_row(session: AsyncSession, company_id: uuid.UUID) -> CompanyCalendarSettings | None:
    result = await session.execute(
        select(CompanyCalendarSettings).where(col(CompanyCalendarSettings.company_id) == company_id)
    )
    return result.scalar_one_or_none()


def _default_response(company_id: uuid.UUID) -> CalendarSettingsResponse:
    settings = get_settings()
    return CalendarSettingsResponse(
        company_id=company_id,
        payroll_cutoff_day=settings.default_payroll_cutoff_day,
        rest_days=sorted(set(settings.default_rest_days)),
        is_default=True,
    )


def _build_response(row: CompanyCalendarSettings) -> CalendarSettingsResponse:
    return CalendarSettingsResponse(
        company_id=row.company_id,
        payroll_cutoff_day=row.payroll_cutoff_day,
        rest_days=sorted(set(row.rest_days)),
        is_default=False,
    )


async def get_calendar_settings(
    session: AsyncSession,
    company_id: uuid.UUID | None,
) -> CalendarSettingsResponse:
    """Effective settings for a company; configured defaults when none are stored.

    Global (company-less) lookups always use the defaults.
    """
    if company_id is None:
        return _default_response(uuid.UUID(int=0))
    row = await _get_row(session, company_id)
    if row is None:
        return _default_response(company_id)
    return _build_response(row)


async def upsert_calendar_settings(
    session: AsyncSession,
    auth: AuthContext,
    company_id: uuid.UUID,
    payload: UpdateCalendarSettingsRequest,
) -> CalendarSettingsResponse:
    """Create or update a company's rest days and payroll cutoff."""
    row = await _get_row(session, company_id)
    before = None
    if row is None:
        defaults = _default_response(company_id)
        row = CompanyCalendarSettings(
            company_id=company_id,
            payroll_cutoff_day=defaults.payroll_cutoff_day,
            rest_days=defaults.rest_days,
        )
        session.add(row)
        action = AuditAction.CREATE
    else:
        before = snapshot(row)
        action = AuditAction.UPDATE

    if payload.payroll_cutoff_day is not None:
        row.payroll_cutoff_day = payload.payroll_cutoff_day
    if payload.rest_days is not None:
        row.rest_days = list(payload.rest_days)
    row.touch()
    await session.flush()

    record_audit(session, actor_id=auth.user_id, action=action, entity=row, before=before, after=snapshot(row))

    await session.commit()
    await session.refresh(row)
    return _build_response(row)


def rest_day_pattern(settings: CalendarSettingsResponse) -> RestDayPattern:
    return RestDayPattern.of(settings.rest_days)
