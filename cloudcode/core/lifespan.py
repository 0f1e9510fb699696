"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic (SRP). Used by main.py;
no business logic here, only wiring of infrastructure (Parse client,
background queue, outbound HTTP client, telemetry flush).
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from cloudcode.api.v1.dependencies import build_cloud_hooks
from cloudcode.core.config import get_settings
from cloudcode.infrastructure.messaging import BackgroundTaskQueue
from cloudcode.infrastructure.parse import close_parse_client, create_parse_client

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: Parse client, background queue workers, content hook
    HTTP client, cloud hooks. Shutdown drains the queue first so no
    fire-and-forget write is lost, then closes HTTP clients and flushes
    telemetry.
    """
    settings = get_settings()

    # ---- Startup ----
    parse = create_parse_client(settings)
    app.state.parse_client = parse

    tasks = BackgroundTaskQueue(
        workers=settings.background_workers,
        maxsize=settings.background_queue_size,
    )
    tasks.start()
    app.state.task_queue = tasks

    # Shared client for content hooks and email (connection reuse across calls).
    app.state.outbound_http = httpx.AsyncClient(
        timeout=settings.content_hook_timeout_seconds
    )
    app.state.cloud_hooks = build_cloud_hooks(
        settings, parse, tasks, app.state.outbound_http
    )
    logger.info("Cloud hooks ready: %s", ", ".join(app.state.cloud_hooks.functions))

    yield

    # ---- Shutdown ----
    await tasks.stop()
    app.state.cloud_hooks = None

    await app.state.outbound_http.aclose()
    app.state.outbound_http = None
    logger.info("Outbound HTTP client closed")

    await close_parse_client(parse)
    app.state.parse_client = None

    telemetry = getattr(app.state, "telemetry", None)
    if telemetry is not None:
        telemetry.shutdown()
        logger.info("Telemetry shutdown complete")
