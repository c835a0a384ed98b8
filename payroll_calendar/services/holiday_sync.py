"""Reconcile the external holiday feed into the holiday store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from payroll_calendar.models.enums import FeedOrigin
from payroll_calendar.schemas.holiday import SyncResult
from payroll_calendar.services.audit import SYSTEM_ACTOR_ID
from payroll_calendar.services.holiday import bulk_create_holidays, seed_year
from payroll_calendar.services.holiday_feed import fetch_year_detailed

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from payroll_calendar.services.holiday_feed import HolidayFeedClient

logger = logging.getLogger(__name__)


async def sync_year(
    session: AsyncSession,
    year: int,
    company_id: uuid.UUID | None = None,
    *,
    client: HolidayFeedClient | None = None,
    actor_id: uuid.UUID = SYSTEM_ACTOR_ID,
) -> SyncResult:
    """Import ``year`` from the feed into the store, skipping existing dates.

    Repeated calls converge on the same stored set; later calls report
    ``created=0``. When the bulk write itself fails, one ``seed_year`` write
    is attempted before reporting ``success=False``. Never raises.
    """
    fetched = await fetch_year_detailed(year, client)

    try:
        outcome = await bulk_create_holidays(
            session,
            fetched.holidays,
            company_id,
            skip_duplicates=True,
            actor_id=actor_id,
        )
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Bulk holiday write failed for %d; trying seed fallback", year)
        bulk_error = str(exc)
    else:
        logger.info(
            "Synced holidays for %d (%s feed): created=%d skipped=%d errors=%d",
            year,
            fetched.origin.value,
            outcome.created,
            outcome.skipped,
            len(outcome.errors),
        )
        return SyncResult(
            year=year,
            success=True,
            feed_origin=fetched.origin,
            created=outcome.created,
            skipped=outcome.skipped,
            errors=outcome.errors,
        )

    try:
        seeded = await seed_year(session, year, company_id, actor_id=actor_id)
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.exception("Seed fallback also failed for %d", year)
        return SyncResult(
            year=year,
            success=False,
            feed_origin=fetched.origin,
            errors=[bulk_error, str(exc)],
        )

    return SyncResult(
        year=year,
        success=True,
        feed_origin=FeedOrigin.FALLBACK if seeded.created or seeded.skipped else FeedOrigin.UNAVAILABLE,
        created=seeded.created,
        skipped=seeded.skipped,
    )
