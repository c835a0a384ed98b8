# ruff: noqa: TC003
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlmodel import Field

from payroll_calendar.models.base import TimestampMixin, UUIDBase


class CompanyCalendarSettings(UUIDBase, TimestampMixin, table=True):
    """Per-company rest-day pattern and payroll cutoff."""

    __tablename__ = "company_calendar_settings"

    company_id: uuid.UUID = Field(unique=True, index=True)
    payroll_cutoff_day: int = 20
    rest_days: list[int] = Field(default_factory=lambda: [5, 6], sa_type=sa.JSON)
