from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

if TYPE_CHECKING:
    from fastapi import FastAPI, Request, Response
    from starlette.middleware.base import RequestResponseEndpoint

    from payroll_calendar.config import Settings

logger = logging.getLogger("payroll_calendar.access")


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and duration of every request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started
        logger.info("%s %s -> %d (%.4fs)", request.method, request.url.path, response.status_code, elapsed)
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        return response


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure application middleware."""
    app.add_middleware(AccessLogMiddleware)  # ty: ignore[invalid-argument-type]
    app.add_middleware(
        CORSMiddleware,  # ty: ignore[invalid-argument-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
