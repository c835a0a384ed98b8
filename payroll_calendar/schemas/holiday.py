# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from payroll_calendar.models.enums import FeedOrigin, HolidaySource, HolidayType
from payroll_calendar.services.dates import to_date


class HolidayInput(BaseModel):
    """Canonical holiday entry produced by importers and bulk uploads."""

    name: str = Field(min_length=1, max_length=255)
    date: datetime.date
    type: HolidayType = HolidayType.NATIONAL
    description: str | None = Field(default=None, max_length=1000)
    is_recurring: bool = False

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_date(cls, value: object) -> datetime.date:
        return to_date(value)


class CreateHolidayRequest(HolidayInput):
    """Request body for a manually entered holiday."""

    company_id: uuid.UUID | None = None


class UpdateHolidayRequest(BaseModel):
    """Partial update; only fields present in the body are applied."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    date: datetime.date | None = None
    type: HolidayType | None = None
    description: str | None = Field(default=None, max_length=1000)
    is_recurring: bool | None = None
    is_active: bool | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _normalize_date(cls, value: object) -> datetime.date | None:
        if value is None:
            return None
        return to_date(value)


class HolidayResponse(BaseModel):
    """Response schema for a holiday."""

    id: uuid.UUID
    name: str
    date: datetime.date
    type: HolidayType
    company_id: uuid.UUID | None
    description: str | None
    is_recurring: bool
    source: HolidaySource
    is_active: bool
    created_at: datetime.datetime


class HolidayListResponse(BaseModel):
    """Paginated list of holidays."""

    items: list[HolidayResponse]
    total: int


class HolidayListFilters(BaseModel):
    """Query filters for listing holidays."""

    company_id: uuid.UUID | None = None
    include_global: bool = False
    year: int | None = Field(default=None, ge=1900, le=9999)
    month: int | None = Field(default=None, ge=1, le=12)
    type: HolidayType | None = None
    is_active: bool | None = None
    search: str | None = None
    sort_by: Literal["date", "name", "type", "created_at"] = "date"
    sort_order: Literal["asc", "desc"] = "asc"


class BulkCreateHolidayRequest(BaseModel):
    """Request body for creating many holidays at once."""

    holidays: list[HolidayInput]
    company_id: uuid.UUID | None = None
    skip_duplicates: bool = True


class BulkCreateResult(BaseModel):
    """Outcome of a bulk holiday write."""

    created: int = 0
    skipped: int = 0
    errors: list[str] = Field(default_factory=list)


class SyncResult(BulkCreateResult):
    """Outcome of a feed-to-store reconciliation."""

    year: int
    success: bool
    feed_origin: FeedOrigin
