import logging
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel
from sqlalchemy import text

from payroll_calendar.config import get_settings
from payroll_calendar.db import SessionDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["ok", "degraded"]
    database: Literal["ok", "unreachable"]
    version: str
    environment: str


@router.get("/health", response_model=HealthResponse)
async def health(session: SessionDep) -> HealthResponse:
    """Report API and holiday store connectivity."""
    settings = get_settings()

    try:
        await session.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Health check: holiday store unreachable")
        return HealthResponse(
            status="degraded",
            database="unreachable",
            version=settings.app_version,
            environment=settings.environment,
        )

    return HealthResponse(
        status="ok",
        database="ok",
        version=settings.app_version,
        environment=settings.environment,
    )
