"""
Global error handling for the FastAPI application.

Catches DreamscapeError subclasses, request validation errors, and
unhandled exceptions, converting them into a consistent JSON envelope:
``{"success": false, "error": ..., "code": ..., "timestamp": ...}``.
"""

import logging
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from dreamscape.core.exceptions import DreamscapeError
from dreamscape.core.models import ErrorResponse

logger = logging.getLogger(__name__)


def _envelope(
    status_code: int, error: str, code: str, timestamp: str | None = None
) -> JSONResponse:
    body = ErrorResponse(
        error=error,
        code=code,
        timestamp=timestamp or datetime.now(UTC).isoformat(),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application.

    Registers three handlers in priority order:
    1. ``DreamscapeError`` - maps domain errors to structured JSON responses.
    2. ``RequestValidationError`` - malformed body or params (422).
    3. ``Exception`` - catch-all for unexpected server errors (500).
    """

    @app.exception_handler(DreamscapeError)
    async def dreamscape_error_handler(_request: Request, exc: DreamscapeError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s: %s", exc.code, exc.detail)
        return _envelope(exc.status_code, exc.detail, exc.code, exc.timestamp)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _envelope(422, str(exc), "VALIDATION_ERROR")

    @app.exception_handler(Exception)
    async def generic_error_handler(_request: Request, exc: Exception) -> JSONResponse:
        """Catch-all handler; prevents stack traces from leaking to clients."""
        logger.exception("Unhandled error: %s", exc)
        return _envelope(500, "Internal server error", "INTERNAL_ERROR")
