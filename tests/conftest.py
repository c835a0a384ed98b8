from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from payroll_calendar.db import get_session
from payroll_calendar.main import app
from payroll_calendar.models import SQLModel
from payroll_calendar.services.holiday_feed import StaticHolidayFeedClient, set_holiday_feed_client

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterator

    from sqlalchemy.ext.asyncio import AsyncEngine

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    """A fresh in-memory database per test."""
    _engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Let SQLAlchemy, not the sqlite3 driver, emit BEGIN so SAVEPOINTs work.
    @event.listens_for(_engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, _record) -> None:  # noqa: ANN001
        dbapi_connection.isolation_level = None

    @event.listens_for(_engine.sync_engine, "begin")
    def _emit_begin(conn) -> None:  # noqa: ANN001
        conn.exec_driver_sql("BEGIN")

    async with _engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield _engine
    await _engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    """Yield a session bound to the per-test database."""
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
async def async_client(db_session: AsyncSession) -> AsyncIterator[AsyncClient]:
    """Async HTTP client with the database session dependency overridden."""

    async def _override_get_session() -> AsyncIterator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_session] = _override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def feed_client() -> Iterator[StaticHolidayFeedClient]:
    """Replace the HTTP feed with an empty in-memory one for every test."""
    client = StaticHolidayFeedClient()
    set_holiday_feed_client(client)
    yield client
    set_holiday_feed_client(None)
