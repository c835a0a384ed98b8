# ruff: noqa: TC003
from __future__ import annotations

import datetime
import uuid

import sqlalchemy as sa
from sqlmodel import Field

from payroll_calendar.models.base import TimestampMixin, UUIDBase
from payroll_calendar.models.enums import HolidaySource, HolidayType

GLOBAL_SCOPE = "global"


def scope_key_for(company_id: uuid.UUID | None) -> str:
    """Return the non-null scope key used for uniqueness checks."""
    return GLOBAL_SCOPE if company_id is None else str(company_id)


class Holiday(UUIDBase, TimestampMixin, table=True):
    """A global or company-scoped holiday excluded from working-day counts."""

    __tablename__ = "holiday"
    __table_args__ = (
        # Imported rows are unique per (scope, date); manual rows are exempt.
        sa.Index(
            "uq_holiday_imported_scope_date",
            "scope_key",
            "date",
            unique=True,
            postgresql_where=sa.text("source = 'imported'"),
            sqlite_where=sa.text("source = 'imported'"),
        ),
        sa.Index("ix_holiday_date", "date"),
    )

    name: str = Field(max_length=255)
    date: datetime.date
    type: str = Field(default=HolidayType.NATIONAL.value, max_length=30)
    company_id: uuid.UUID | None = Field(default=None, index=True)
    scope_key: str = Field(default=GLOBAL_SCOPE, max_length=64)
    description: str | None = Field(default=None, max_length=1000)
    is_recurring: bool = False
    source: str = Field(default=HolidaySource.MANUAL.value, max_length=20)
    is_active: bool = True
