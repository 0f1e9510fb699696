"""Health check endpoints for liveness and readiness probes."""

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from cloudcode.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Parse Server unreachable", "model": ReadinessErrorResponse}},
)
async def readiness_check(request: Request) -> ReadinessResponse | JSONResponse:
    """Return 200 when Parse Server answers its own /health; 503 otherwise."""
    parse = getattr(request.app.state, "parse_client", None)
    tasks = getattr(request.app.state, "task_queue", None)
    if parse is None:
        return _not_ready("Parse client is not initialized")
    try:
        resp = await parse.http.get(f"{parse.server_url}/health", headers=parse.headers)
    except httpx.HTTPError as e:
        return _not_ready(f"Parse Server unreachable: {e}")
    if resp.status_code != 200:
        return _not_ready(f"Parse Server health returned {resp.status_code}")
    return ReadinessResponse(
        pending_tasks=tasks.pending if tasks is not None else 0,
        failed_tasks=tasks.failed if tasks is not None else 0,
    )


def _not_ready(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=503,
        content=ReadinessErrorResponse(status="not_ready", message=message).model_dump(),
    )
