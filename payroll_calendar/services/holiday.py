from __future__ import annotations

import logging
import uuid
from datetime import date, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from payroll_calendar.exceptions import AppError, ConflictError, NotFoundError
from payroll_calendar.models.enums import AuditAction, HolidaySource, HolidayType
from payroll_calendar.models.holiday import Holiday, scope_key_for
from payroll_calendar.schemas.holiday import BulkCreateResult, HolidayListResponse, HolidayResponse
from payroll_calendar.services.audit import SYSTEM_ACTOR_ID, record_audit, snapshot
from payroll_calendar.services.dates import normalize_date
from payroll_calendar.services.holiday_feed import fallback_holidays
from payroll_calendar.services.working_days import month_bounds

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from payroll_calendar.schemas.auth import AuthContext
    from payroll_calendar.schemas.holiday import (
        CreateHolidayRequest,
        HolidayInput,
        HolidayListFilters,
        UpdateHolidayRequest,
    )

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    "date": col(Holiday.date),
    "name": col(Holiday.name),
    "type": col(Holiday.type),
    "created_at": col(Holiday.created_at),
}


def build_holiday_response(holiday: Holiday) -> HolidayResponse:
    return HolidayResponse(
        id=holiday.id,
        name=holiday.name,
        date=holiday.date,
        type=HolidayType(holiday.type),
        company_id=holiday.company_id,
        description=holiday.description,
        is_recurring=holiday.is_recurring,
        source=HolidaySource(holiday.source),
        is_active=holiday.is_active,
        created_at=holiday.created_at,
    )


def _date_range(year: int, month: int | None = None) -> tuple[date, date]:
    """Inclusive first and last day of a year or of one month in it."""
    if month is None:
        return month_bounds(year, 1)[0], month_bounds(year, 12)[1]
    return month_bounds(year, month)


def _scope_filter(company_id: uuid.UUID | None, include_global: bool) -> list:
    if company_id is None:
        return []
    if include_global:
        return [or_(col(Holiday.company_id) == company_id, col(Holiday.company_id).is_(None))]
    return [col(Holiday.company_id) == company_id]


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


async def list_holidays(
    session: AsyncSession,
    filters: HolidayListFilters,
    offset: int = 0,
    limit: int = 50,
) -> HolidayListResponse:
    """List holidays matching the given filters."""
    conditions = _scope_filter(filters.company_id, filters.include_global)

    if filters.year is not None:
        start, end = _date_range(filters.year, filters.month)
        conditions.append(col(Holiday.date) >= start)
        conditions.append(col(Holiday.date) <= end)
    elif filters.month is not None:
        raise AppError("Filtering by month requires a year", status_code=400)

    if filters.type is not None:
        conditions.append(col(Holiday.type) == filters.type.value)
    if filters.is_active is not None:
        conditions.append(col(Holiday.is_active) == filters.is_active)
    if filters.search:
        conditions.append(func.lower(col(Holiday.name)).contains(filters.search.lower()))

    count_result = await session.execute(select(func.count()).select_from(Holiday).where(*conditions))
    total = count_result.scalar_one()

    sort_column = _SORT_COLUMNS[filters.sort_by]
    ordering = sort_column.desc() if filters.sort_order == "desc" else sort_column.asc()
    result = await session.execute(
        select(Holiday).where(*conditions).order_by(ordering, col(Holiday.name)).offset(offset).limit(limit)
    )
    holidays = list(result.scalars().all())

    return HolidayListResponse(
        items=[build_holiday_response(h) for h in holidays],
        total=total,
    )


async def get_holiday(session: AsyncSession, holiday_id: uuid.UUID) -> Holiday:
    """Get a single holiday or raise 404."""
    holiday = await session.get(Holiday, holiday_id)
    if holiday is None:
        raise NotFoundError("Holiday not found")
    return holiday


async def get_holidays_between(
    session: AsyncSession,
    start: date,
    end: date,
    company_id: uuid.UUID | None = None,
) -> list[Holiday]:
    """Active holidays from start to end inclusive: global ones plus the company's."""
    conditions = [
        col(Holiday.is_active).is_(True),
        col(Holiday.date) >= start,
        col(Holiday.date) <= end,
    ]
    if company_id is None:
        conditions.append(col(Holiday.company_id).is_(None))
    else:
        conditions.extend(_scope_filter(company_id, include_global=True))

    result = await session.execute(select(Holiday).where(*conditions).order_by(col(Holiday.date), col(Holiday.name)))
    return list(result.scalars().all())


async def get_calendar(
    session: AsyncSession,
    year: int,
    month: int | None = None,
    company_id: uuid.UUID | None = None,
) -> list[Holiday]:
    """Active global holidays plus the company's, for a year or a month."""
    start, end = _date_range(year, month)
    return await get_holidays_between(session, start, end, company_id)


async def get_upcoming(
    session: AsyncSession,
    days: int = 30,
    company_id: uuid.UUID | None = None,
    today: date | None = None,
) -> list[Holiday]:
    """Active holidays between today and ``days`` days from now, inclusive."""
    start = today or date.today()
    end = start + timedelta(days=days)
    return await get_holidays_between(session, start, end, company_id)


# ---------------------------------------------------------------------------
# Manual entry
# ---------------------------------------------------------------------------


async def create_holiday(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateHolidayRequest,
) -> HolidayResponse:
    """Create a manually entered holiday. Manual entries may share a date."""
    holiday = Holiday(
        name=payload.name,
        date=payload.date,
        type=payload.type.value,
        company_id=payload.company_id,
        scope_key=scope_key_for(payload.company_id),
        description=payload.description,
        is_recurring=payload.is_recurring,
        source=HolidaySource.MANUAL.value,
    )
    session.add(holiday)
    await session.flush()

    record_audit(session, actor_id=auth.user_id, action=AuditAction.CREATE, entity=holiday, after=snapshot(holiday))

    await session.commit()
    await session.refresh(holiday)
    return build_holiday_response(holiday)


async def update_holiday(
    session: AsyncSession,
    auth: AuthContext,
    holiday_id: uuid.UUID,
    patch: UpdateHolidayRequest,
) -> HolidayResponse:
    """Apply the fields present in ``patch`` to a holiday."""
    holiday = await get_holiday(session, holiday_id)
    before = snapshot(holiday)

    changes = patch.model_dump(exclude_unset=True)
    if changes.get("name", "") is None or ("date" in changes and changes["date"] is None):
        raise AppError("Holiday name and date cannot be cleared", status_code=422)

    for field_name, value in changes.items():
        if field_name == "type" and value is not None:
            value = HolidayType(value).value
        if field_name in ("type", "is_recurring", "is_active") and value is None:
            continue
        setattr(holiday, field_name, value)
    holiday.touch()

    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise ConflictError("An imported holiday already exists on this date") from None

    record_audit(
        session,
        actor_id=auth.user_id,
        action=AuditAction.UPDATE,
        entity=holiday,
        before=before,
        after=snapshot(holiday),
    )

    await session.commit()
    await session.refresh(holiday)
    return build_holiday_response(holiday)


async def delete_holiday(
    session: AsyncSession,
    auth: AuthContext,
    holiday_id: uuid.UUID,
) -> None:
    """Hard-delete a holiday."""
    holiday = await get_holiday(session, holiday_id)

    record_audit(session, actor_id=auth.user_id, action=AuditAction.DELETE, entity=holiday, before=snapshot(holiday))

    await session.delete(holiday)
    await session.commit()


# ---------------------------------------------------------------------------
# Bulk import
# ---------------------------------------------------------------------------


async def _existing_dates(session: AsyncSession, scope_key: str, dates: set[date]) -> set[str]:
    """Normalized dates in ``dates`` that already have a holiday in this scope."""
    if not dates:
        return set()
    result = await session.execute(
        select(col(Holiday.date)).where(
            col(Holiday.scope_key) == scope_key,
            col(Holiday.date).in_(sorted(dates)),
        )
    )
    return {normalize_date(row[0]) for row in result.all()}


def _imported_holiday(entry: HolidayInput, company_id: uuid.UUID | None) -> Holiday:
    return Holiday(
        name=entry.name,
        date=entry.date,
        type=entry.type.value,
        company_id=company_id,
        scope_key=scope_key_for(company_id),
        description=entry.description,
        is_recurring=entry.is_recurring,
        source=HolidaySource.IMPORTED.value,
    )


async def bulk_create_holidays(
    session: AsyncSession,
    holidays: Sequence[HolidayInput],
    company_id: uuid.UUID | None = None,
    *,
    skip_duplicates: bool = True,
    actor_id: uuid.UUID = SYSTEM_ACTOR_ID,
) -> BulkCreateResult:
    """Insert imported holidays, de-duplicated by (date, scope).

    A date already held by any holiday in the scope, or by an earlier entry in
    the same batch, is skipped when ``skip_duplicates`` is set and reported as
    an error otherwise. Does not commit; database failures other than a
    uniqueness collision propagate.
    """
    result = BulkCreateResult()
    scope_key = scope_key_for(company_id)
    seen = await _existing_dates(session, scope_key, {entry.date for entry in holidays})

    for entry in holidays:
        key = normalize_date(entry.date)
        if key in seen:
            if skip_duplicates:
                result.skipped += 1
            else:
                result.errors.append(f"Duplicate holiday on {key}: {entry.name}")
            continue

        holiday = _imported_holiday(entry, company_id)
        try:
            async with session.begin_nested():
                session.add(holiday)
                await session.flush()
        except IntegrityError:
            # A concurrent import inserted the same (scope, date) first.
            seen.add(key)
            if skip_duplicates:
                result.skipped += 1
            else:
                result.errors.append(f"Duplicate holiday on {key}: {entry.name}")
            continue

        seen.add(key)
        result.created += 1
        record_audit(session, actor_id=actor_id, action=AuditAction.IMPORT, entity=holiday, after=snapshot(holiday))

    await session.flush()
    logger.debug(
        "Bulk holiday write for scope %s: created=%d skipped=%d errors=%d",
        scope_key,
        result.created,
        result.skipped,
        len(result.errors),
    )
    return result


async def seed_year(
    session: AsyncSession,
    year: int,
    company_id: uuid.UUID | None = None,
    *,
    actor_id: uuid.UUID = SYSTEM_ACTOR_ID,
) -> BulkCreateResult:
    """Write the static holiday list for ``year`` in one flush and commit.

    Dates that already exist in the scope are skipped. Years without a static
    list create nothing.
    """
    scope_key = scope_key_for(company_id)
    entries = fallback_holidays(year)
    seen = await _existing_dates(session, scope_key, {entry.date for entry in entries})

    result = BulkCreateResult()
    for entry in entries:
        key = normalize_date(entry.date)
        if key in seen:
            result.skipped += 1
            continue
        seen.add(key)
        session.add(_imported_holiday(entry, company_id))
        result.created += 1

    await session.flush()
    await session.commit()
    logger.info("Seeded %d holidays for %d (scope %s, skipped=%d)", result.created, year, scope_key, result.skipped)
    return result
