"""Parse Server webhook request schema."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class WebhookPayload(BaseModel):
    """Body Parse Server posts to a function or trigger webhook.

    Objects stay raw Parse JSON here; the endpoint decodes them into
    documents. Fields Parse adds that the engine does not use (headers,
    ip, installationId, context) are accepted and ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    master: bool = False
    user: dict[str, Any] | None = None
    object: dict[str, Any] | None = Field(default=None, alias="object")
    original: dict[str, Any] | None = None
    params: dict[str, Any] = Field(default_factory=dict)
    trigger_name: str | None = Field(default=None, alias="triggerName")
    function_name: str | None = Field(default=None, alias="functionName")
