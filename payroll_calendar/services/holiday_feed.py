"""Public-holiday feed importer.

Fetches a year of Indonesian public holidays from the external feed and turns
them into canonical :class:`HolidayInput` entries. The importer fails open: a
transport or payload error yields the static fallback list for that year when
one exists, otherwise no holidays, and the caller is told which one it got.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import httpx
from pydantic import BaseModel, TypeAdapter

from payroll_calendar.config import get_settings
from payroll_calendar.models.enums import FeedOrigin, HolidayType
from payroll_calendar.schemas.holiday import HolidayInput

if TYPE_CHECKING:
    from datetime import date

logger = logging.getLogger(__name__)


class HolidayFeedError(Exception):
    """Raised by feed clients when a year cannot be fetched."""


class FeedEntry(BaseModel):
    """One row of the external feed payload."""

    holiday_date: str
    holiday_name: str
    is_national_holiday: bool = False


_feed_adapter: TypeAdapter[list[FeedEntry]] = TypeAdapter(list[FeedEntry])


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

_RELIGIOUS_KEYWORDS = ("idul", "natal", "waisak", "nyepi", "imlek", "maulid", "isra", "wafat", "kenaikan")


def _contains(*keywords: str) -> Callable[[str], bool]:
    return lambda name: any(keyword in name for keyword in keywords)


# Evaluated in order, first match wins. "Cuti bersama" names often carry a
# religious keyword too ("Cuti Bersama Idul Fitri"), so it must come first.
CLASSIFICATION_RULES: list[tuple[Callable[[str], bool], HolidayType]] = [
    (_contains("cuti bersama"), HolidayType.SHARED_LEAVE),
    (_contains(*_RELIGIOUS_KEYWORDS), HolidayType.RELIGIOUS),
]


def classify_holiday(name: str) -> HolidayType:
    """Classify a holiday by its (Indonesian) name."""
    lowered = name.lower()
    for predicate, holiday_type in CLASSIFICATION_RULES:
        if predicate(lowered):
            return holiday_type
    return HolidayType.NATIONAL


# ---------------------------------------------------------------------------
# Static fallback data
# ---------------------------------------------------------------------------

_FALLBACK_HOLIDAYS: dict[int, list[tuple[str, str, HolidayType]]] = {
    2026: [
        ("2026-01-01", "Tahun Baru Masehi", HolidayType.NATIONAL),
        ("2026-02-17", "Tahun Baru Imlek", HolidayType.RELIGIOUS),
        ("2026-03-19", "Hari Raya Nyepi", HolidayType.RELIGIOUS),
        ("2026-03-20", "Hari Raya Idul Fitri (Hari 1)", HolidayType.RELIGIOUS),
        ("2026-03-21", "Hari Raya Idul Fitri (Hari 2)", HolidayType.RELIGIOUS),
        ("2026-04-03", "Wafat Isa Almasih", HolidayType.RELIGIOUS),
        ("2026-05-01", "Hari Buruh Internasional", HolidayType.NATIONAL),
        ("2026-05-14", "Kenaikan Isa Almasih", HolidayType.RELIGIOUS),
        ("2026-05-27", "Hari Raya Idul Adha", HolidayType.RELIGIOUS),
        ("2026-06-01", "Hari Lahir Pancasila", HolidayType.NATIONAL),
        ("2026-06-01", "Hari Raya Waisak", HolidayType.RELIGIOUS),
        ("2026-06-17", "Tahun Baru Islam 1448 H", HolidayType.RELIGIOUS),
        ("2026-08-17", "Hari Kemerdekaan RI", HolidayType.NATIONAL),
        ("2026-08-26", "Maulid Nabi Muhammad SAW", HolidayType.RELIGIOUS),
        ("2026-12-25", "Hari Raya Natal", HolidayType.RELIGIOUS),
    ],
}


def merge_same_day(holidays: list[HolidayInput]) -> list[HolidayInput]:
    """Collapse entries sharing a date into one, keeping first-seen order.

    Names are joined with `` / ``; the first entry's type wins.
    """
    merged: dict[date, HolidayInput] = {}
    for holiday in holidays:
        existing = merged.get(holiday.date)
        if existing is None:
            merged[holiday.date] = holiday
        elif holiday.name not in existing.name.split(" / "):
            name = f"{existing.name} / {holiday.name}"[:255]
            merged[holiday.date] = existing.model_copy(update={"name": name})
    return list(merged.values())


def fallback_holidays(year: int) -> list[HolidayInput]:
    """Return the static holiday list for ``year`` (one entry per date), or an empty list."""
    return merge_same_day(
        [
            HolidayInput(name=name, date=day, type=holiday_type)
            for day, name, holiday_type in _FALLBACK_HOLIDAYS.get(year, [])
        ]
    )


# ---------------------------------------------------------------------------
# Feed clients
# ---------------------------------------------------------------------------


@runtime_checkable
class HolidayFeedClient(Protocol):
    """Interface for the external public-holiday feed."""

    async def fetch_raw(self, year: int) -> Any:
        """Return the decoded feed payload for ``year``."""
        ...


class HttpHolidayFeedClient:
    """Feed client that calls ``GET <base_url>?year=<year>``."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    async def fetch_raw(self, year: int) -> Any:
        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            response = await client.get(self._base_url, params={"year": year})
            response.raise_for_status()
            return response.json()


class StaticHolidayFeedClient:
    """In-memory feed for development and tests."""

    def __init__(self) -> None:
        self._payloads: dict[int, Any] = {}
        self.calls: list[int] = []

    def seed(self, year: int, payload: Any) -> None:
        """Register the payload returned for ``year``."""
        self._payloads[year] = payload

    async def fetch_raw(self, year: int) -> Any:
        self.calls.append(year)
        if year not in self._payloads:
            msg = f"No feed data for {year}"
            raise HolidayFeedError(msg)
        return self._payloads[year]


_feed_client: HolidayFeedClient | None = None


def get_holiday_feed_client() -> HolidayFeedClient:
    """Return the configured feed client, defaulting to the HTTP feed."""
    global _feed_client
    if _feed_client is None:
        settings = get_settings()
        _feed_client = HttpHolidayFeedClient(
            settings.holiday_feed_url,
            timeout=settings.holiday_feed_timeout_seconds,
        )
    return _feed_client


def set_holiday_feed_client(client: HolidayFeedClient | None) -> None:
    """Override the feed client (for testing or production wiring)."""
    global _feed_client
    _feed_client = client


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------


@dataclass
class FeedFetchResult:
    """Holidays fetched for a year and where they came from."""

    year: int
    origin: FeedOrigin
    holidays: list[HolidayInput] = field(default_factory=list)


def _to_inputs(entries: list[FeedEntry]) -> list[HolidayInput]:
    return merge_same_day(
        [
            HolidayInput(
                name=entry.holiday_name.strip(),
                date=entry.holiday_date,
                type=classify_holiday(entry.holiday_name),
            )
            for entry in entries
            if entry.is_national_holiday is True
        ]
    )


async def fetch_year_detailed(year: int, client: HolidayFeedClient | None = None) -> FeedFetchResult:
    """Fetch and convert a year of holidays. Never raises."""
    feed = client if client is not None else get_holiday_feed_client()
    try:
        payload = await feed.fetch_raw(year)
        holidays = _to_inputs(_feed_adapter.validate_python(payload))
    except Exception as exc:  # noqa: BLE001
        fallback = fallback_holidays(year)
        origin = FeedOrigin.FALLBACK if fallback else FeedOrigin.UNAVAILABLE
        logger.warning(
            "Holiday feed failed for %d (%s: %s); using %s data (%d entries)",
            year,
            type(exc).__name__,
            exc,
            origin.value,
            len(fallback),
        )
        return FeedFetchResult(year=year, origin=origin, holidays=fallback)

    logger.info("Fetched %d national holidays for %d from feed", len(holidays), year)
    return FeedFetchResult(year=year, origin=FeedOrigin.LIVE, holidays=holidays)


async def fetch_year(year: int, client: HolidayFeedClient | None = None) -> list[HolidayInput]:
    """Fetch a year of holidays, falling back to static or empty data."""
    result = await fetch_year_detailed(year, client)
    return result.holidays
