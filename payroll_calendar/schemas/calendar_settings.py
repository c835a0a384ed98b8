# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel, Field, field_validator


class UpdateCalendarSettingsRequest(BaseModel):
    """Request body for a company's rest days and payroll cutoff."""

    payroll_cutoff_day: int | None = Field(default=None, ge=1, le=31)
    rest_days: list[int] | None = None

    @field_validator("rest_days")
    @classmethod
    def _validate_rest_days(cls, value: list[int] | None) -> list[int] | None:
        if value is None:
            return None
        days = sorted(set(value))
        if any(day < 0 or day > 6 for day in days):
            msg = "rest_days must be weekday indices between 0 (Monday) and 6 (Sunday)"
            raise ValueError(msg)
        if len(days) == 7:
            msg = "rest_days cannot cover the whole week"
            raise ValueError(msg)
        return days


class CalendarSettingsResponse(BaseModel):
    """A company's effective calendar settings."""

    company_id: uuid.UUID
    payroll_cutoff_day: int
    rest_days: list[int]
    is_default: bool
