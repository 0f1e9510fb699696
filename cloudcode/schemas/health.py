"""Health check API schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health (liveness)."""

    status: str = Field(default="ok", description="Service status")


class ReadinessResponse(BaseModel):
    """Response for GET /health/ready when Parse Server answers."""

    status: str = Field(default="ok", description="Readiness status")
    pending_tasks: int = Field(default=0, description="Fire-and-forget jobs waiting in the queue")
    failed_tasks: int = Field(default=0, description="Fire-and-forget jobs that failed since startup")


class ReadinessErrorResponse(BaseModel):
    """Response for GET /health/ready when Parse Server is unreachable (503)."""

    status: str = Field(default="not_ready", description="Readiness status")
    message: str = Field(..., description="Reason (e.g. Parse Server unreachable)")
