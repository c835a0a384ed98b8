"""Tests for application wiring: engine options and error rendering."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock

from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_calendar.config import Settings
from payroll_calendar.db import engine_options, get_session
from payroll_calendar.exceptions import AppError, ConflictError, ForbiddenError, NotFoundError
from payroll_calendar.main import app

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

AUTH_HEADERS = {"X-User-Id": str(uuid.uuid4()), "X-Role": "admin"}


def test_engine_options_for_postgres() -> None:
    options = engine_options(Settings(database_url="postgresql+asyncpg://u:p@db/cal", database_pool_size=3))
    assert options["pool_size"] == 3
    assert options["pool_pre_ping"] is True
    assert "connect_args" not in options


def test_engine_options_for_sqlite() -> None:
    options = engine_options(Settings(database_url="sqlite+aiosqlite:///calendar.db"))
    assert options["connect_args"] == {"check_same_thread": False}
    assert "pool_size" not in options


def test_error_status_codes() -> None:
    assert NotFoundError("x").status_code == 404
    assert ConflictError("x").status_code == 409
    assert ForbiddenError("x").status_code == 403
    assert AppError("x").status_code == 500
    assert AppError("x", status_code=400).status_code == 400


async def test_not_found_error_body(async_client: AsyncClient) -> None:
    resp = await async_client.get(f"/holidays/{uuid.uuid4()}", headers=AUTH_HEADERS)
    assert resp.status_code == 404
    assert resp.json() == {"error": "NotFoundError", "detail": "Holiday not found", "status_code": 404}


async def test_database_errors_render_as_503() -> None:
    mock_session = AsyncMock(spec=AsyncSession)
    mock_session.execute.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))

    async def _broken_session() -> AsyncIterator[AsyncSession]:
        yield mock_session

    app.dependency_overrides[get_session] = _broken_session
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/holidays", headers=AUTH_HEADERS)
        assert response.status_code == 503
        assert response.json()["error"] == "StoreUnavailable"
    finally:
        app.dependency_overrides.clear()
