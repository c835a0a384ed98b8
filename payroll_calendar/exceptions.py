import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    """Error body returned by every failing endpoint."""

    error: str
    detail: str | None = None
    status_code: int


class AppError(Exception):
    """Base application exception, rendered as an :class:`ErrorResponse`."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


def _error_response(error: str, detail: str | None, status_code: int) -> JSONResponse:
    body = ErrorResponse(error=error, detail=detail, status_code=status_code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def _app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return _error_response(type(exc).__name__, exc.message, exc.status_code)


async def _validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    return _error_response("ValidationError", str(exc.errors()), status.HTTP_422_UNPROCESSABLE_ENTITY)


async def _database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("%s %s: holiday store error", request.method, request.url.path, exc_info=exc)
    return _error_response("StoreUnavailable", "Holiday store unavailable", status.HTTP_503_SERVICE_UNAVAILABLE)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(AppError, _app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _database_exception_handler)  # type: ignore[arg-type]
