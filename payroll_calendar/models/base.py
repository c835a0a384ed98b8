from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


def now_utc() -> datetime:
    return datetime.now(UTC)


def _timestamp_field() -> Any:
    return Field(
        default_factory=now_utc,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )


class UUIDBase(SQLModel):
    """Base model with a random UUID primary key."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, sa_type=sa.Uuid)


class TimestampMixin(SQLModel):
    """Adds ``created_at``/``updated_at``; call :meth:`touch` on every change."""

    created_at: datetime = _timestamp_field()
    updated_at: datetime = _timestamp_field()

    def touch(self) -> None:
        self.updated_at = now_utc()
