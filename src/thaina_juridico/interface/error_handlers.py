"""Global exception handlers — translate domain errors to HTTP responses.

Each domain exception maps to a specific HTTP status code and the
``{"error": "..."}`` envelope the frontend expects.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from thaina_juridico.domain.exceptions import (
    ConfigError,
    DocumentStoreError,
    ExtractionError,
    InvalidRequestError,
    LegislationFetchError,
    ThainaError,
    UpstreamError,
    UpstreamRateLimitError,
)

logger = logging.getLogger(__name__)

# Subclasses first: UpstreamRateLimitError is an UpstreamError.
_EXCEPTION_STATUS: list[tuple[type[ThainaError], int]] = [
    (InvalidRequestError, 400),
    (UpstreamRateLimitError, 429),
    (UpstreamError, 500),
    (ConfigError, 500),
    (DocumentStoreError, 500),
    (ExtractionError, 500),
    (LegislationFetchError, 500),
]


def error_json(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def status_for(exc: ThainaError) -> int:
    """HTTP status for a domain exception (500 when unmapped)."""
    for exc_type, code in _EXCEPTION_STATUS:
        if isinstance(exc, exc_type):
            return code
    return 500


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application."""

    # ── Domain exceptions ───────────────────────────────────────────────

    @app.exception_handler(ThainaError)
    async def domain_handler(request: Request, exc: ThainaError) -> JSONResponse:
        code = status_for(exc)
        logger.warning("%s (%d): %s", type(exc).__name__, code, exc)
        return error_json(code, str(exc))

    # ── Pydantic / FastAPI validation errors ────────────────────────────

    @app.exception_handler(RequestValidationError)
    async def validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        messages = []
        for err in exc.errors():
            loc = " → ".join(str(p) for p in err.get("loc", []))
            messages.append(f"{loc}: {err.get('msg', 'validation error')}")
        return error_json(400, "; ".join(messages))

    # ── Catch-all for unexpected errors ─────────────────────────────────

    @app.exception_handler(Exception)
    async def generic_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception")
        return error_json(500, "An unexpected error occurred. Please try again later.")
