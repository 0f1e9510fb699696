"""API v1 router aggregation.

Webhook routes are mounted at the paths configured in Parse Server
(``/webhooks/...``); health probes at ``/health``.
"""

from fastapi import APIRouter

from cloudcode.api.v1.endpoints import health, webhooks

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(webhooks.router, prefix="/webhooks", tags=["webhooks"])
