"""Centralized exception handlers for the FastAPI app.

Register with register_exception_handlers(app). Parse Server reads the
``error`` key of a webhook response, so engine exceptions are answered
with 200 and ``{"error": message}``; framework errors keep their status.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from cloudcode.core.config import get_settings
from cloudcode.domain.exceptions import CloudCodeException

logger = logging.getLogger(__name__)

# Errors that are expected outcomes of a webhook call, not failures of this service
_QUIET_ERROR_CODES = frozenset(
    {
        "ACCESS_DENIED",
        "AUTHENTICATION_ERROR",
        "SITES_LIMIT_EXCEEDED",
        "VALIDATION_ERROR",
    }
)


def _cloud_code_exception_handler(
    request: Request, exc: CloudCodeException
) -> JSONResponse:
    """Return Parse webhook error body ``{"error", "code"}`` with status 200."""
    if exc.error_code in _QUIET_ERROR_CODES:
        logger.info("Webhook %s rejected: %s", request.url.path, exc.message)
    else:
        logger.warning(
            "Webhook %s failed: %s (%s)", request.url.path, exc.message, exc.details
        )
    return JSONResponse(
        status_code=200,
        content={"error": exc.message, "code": exc.error_code},
    )


def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 422 with validation error details."""
    return JSONResponse(
        status_code=422,
        content={
            "error": "Request validation failed",
            "code": "VALIDATION_ERROR",
            "details": exc.errors(),
        },
    )


def _http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Return JSON for Starlette HTTP exceptions (status + detail)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "code": "HTTP_ERROR"},
    )


def _generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return 500; include detail only when debug is True."""
    logger.exception("Unhandled exception: %s", exc)
    settings = get_settings()
    detail: Any = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"error": detail, "code": "INTERNAL_ERROR"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Call once after creating the app. Handlers: CloudCodeException (and
    subclasses), RequestValidationError, StarletteHTTPException, generic Exception.
    """
    app.add_exception_handler(CloudCodeException, _cloud_code_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(Exception, _generic_exception_handler)
