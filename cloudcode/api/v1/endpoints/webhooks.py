"""Parse Server cloud-code webhooks: cloud functions and object triggers.

Parse posts here instead of running JavaScript cloud code. Success is
``{"success": value}``; engine errors become ``{"error": message}`` in the
exception handlers, both with status 200 as Parse expects.
"""

from typing import Any

from fastapi import APIRouter, Depends

from cloudcode.api.v1.dependencies import CloudHooksDep, verify_webhook_key
from cloudcode.application.dtos.document import Document
from cloudcode.application.dtos.hook import HookRequest
from cloudcode.core.constants import CLASS_USER
from cloudcode.infrastructure.parse import decode_document, encode_document, encode_value
from cloudcode.schemas.webhook import WebhookPayload
from cloudcode.shared.telemetry.tracing import TracedOperation

router = APIRouter(dependencies=[Depends(verify_webhook_key)])


def _hook_request(payload: WebhookPayload, class_name: str | None = None) -> HookRequest:
    """Decode the Parse objects in a webhook body into documents."""
    obj = original = None
    if payload.object is not None:
        obj = decode_document(class_name or payload.object.get("className", ""), payload.object)
    if payload.original is not None:
        original = decode_document(obj.class_name if obj else class_name or "", payload.original)
    return HookRequest(
        user=decode_document(CLASS_USER, payload.user) if payload.user else None,
        obj=obj,
        original=original,
        master=payload.master,
        params=payload.params,
    )


@router.post("/functions/{name}")
async def run_function(
    name: str,
    payload: WebhookPayload,
    hooks: CloudHooksDep,
) -> dict[str, Any]:
    """Run a cloud function (deleteContentItem, getSiteNameId, inviteUser, onContentModify)."""
    async with TracedOperation("webhook.function", {"function": name}):
        result = await hooks.run_function(name, _hook_request(payload))
    return {"success": encode_value(result)}


@router.post("/triggers/{trigger}/{class_name}")
async def run_trigger(
    trigger: str,
    class_name: str,
    payload: WebhookPayload,
    hooks: CloudHooksDep,
) -> dict[str, Any]:
    """Run an object trigger. beforeSave answers with the object Parse should store."""
    async with TracedOperation(
        "webhook.trigger", {"trigger": trigger, "class_name": class_name}
    ):
        result = await hooks.run_trigger(trigger, class_name, _hook_request(payload, class_name))
    if isinstance(result, Document):
        return {"success": encode_document(result)}
    return {"success": True}
