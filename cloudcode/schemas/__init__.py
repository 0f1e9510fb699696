"""Pydantic request/response schemas for the API."""

from cloudcode.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)
from cloudcode.schemas.webhook import WebhookPayload

__all__ = [
    "HealthResponse",
    "ReadinessErrorResponse",
    "ReadinessResponse",
    "WebhookPayload",
]
