"""Worker process that keeps the holiday store in step with the public feed.

Runs an asyncio loop that syncs the current and the following year's global
holidays once per ``sync_interval_seconds``.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date

from payroll_calendar.config import get_settings
from payroll_calendar.db import get_session_factory

logger = logging.getLogger(__name__)


def years_to_sync(today: date) -> list[int]:
    """The current year, plus the next one so December payroll sees January."""
    return [today.year, today.year + 1]


async def run_sync_once(today: date) -> None:
    """Sync every year returned by :func:`years_to_sync`, one session each."""
    from payroll_calendar.services.holiday_sync import sync_year

    session_factory = get_session_factory()
    for year in years_to_sync(today):
        try:
            async with session_factory() as session:
                result = await sync_year(session, year)
            logger.info(
                "Holiday sync for %d: success=%s origin=%s created=%d skipped=%d errors=%d",
                year,
                result.success,
                result.feed_origin.value,
                result.created,
                result.skipped,
                len(result.errors),
            )
        except Exception:
            logger.exception("Holiday sync failed for %d", year)


async def run_sync_loop() -> None:
    """Main worker loop."""
    interval = get_settings().sync_interval_seconds
    logger.info("Holiday sync worker started (interval=%ds)", interval)

    while True:
        await run_sync_once(date.today())
        await asyncio.sleep(interval)


def main() -> None:
    """Entry point for the worker process."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    asyncio.run(run_sync_loop())


if __name__ == "__main__":
    main()
