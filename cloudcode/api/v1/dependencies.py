"""Presentation-layer dependency injection (composition root).

build_cloud_hooks wires the engine from infrastructure implementations
once, in the lifespan; routes get it from app.state through
get_cloud_hooks and never construct services themselves.
"""

from __future__ import annotations

import hmac
from typing import Annotated

import httpx
from fastapi import Depends, HTTPException, Request

from cloudcode.application.services import (
    AclPropagationService,
    CascadeDeleteService,
    ProvisioningService,
    TableRegistry,
)
from cloudcode.application.interfaces import IEmailSender
from cloudcode.application.use_cases import CloudHooks
from cloudcode.core.config import Settings, get_settings
from cloudcode.infrastructure.external import (
    HttpContentHookClient,
    LogOnlyEmailSender,
    MailgunEmailSender,
)
from cloudcode.infrastructure.messaging import BackgroundTaskQueue
from cloudcode.infrastructure.parse import (
    ParsePayPlanProvider,
    ParseRESTClient,
    ParseSchemaGateway,
)


def build_email_sender(settings: Settings, http: httpx.AsyncClient) -> IEmailSender:
    """Mailgun when an API key is configured, else log only."""
    if settings.mailgun_api_key is None:
        return LogOnlyEmailSender()
    return MailgunEmailSender(
        http,
        api_key=settings.mailgun_api_key.get_secret_value(),
        domain=settings.mailgun_domain,
        from_address=settings.from_address,
        api_url=settings.mailgun_api_url,
        timeout=settings.email_timeout_seconds,
    )


def build_cloud_hooks(
    settings: Settings,
    parse: ParseRESTClient,
    tasks: BackgroundTaskQueue,
    outbound_http: httpx.AsyncClient,
) -> CloudHooks:
    """Compose the engine services over one Parse client and one task queue.

    outbound_http is shared by content hook calls and email delivery.
    """
    registry = TableRegistry(parse, ParseSchemaGateway(parse))
    return CloudHooks(
        registry=registry,
        propagation=AclPropagationService(parse, registry, tasks),
        cascade=CascadeDeleteService(parse, registry, tasks),
        provisioning=ProvisioningService(parse, registry, ParsePayPlanProvider(parse)),
        content_hooks=HttpContentHookClient(
            outbound_http, timeout=settings.content_hook_timeout_seconds
        ),
        mailer=build_email_sender(settings, outbound_http),
        site_url=settings.site_url,
    )


def get_cloud_hooks(request: Request) -> CloudHooks:
    """CloudHooks built at startup (app.state.cloud_hooks)."""
    hooks = getattr(request.app.state, "cloud_hooks", None)
    if hooks is None:
        raise HTTPException(status_code=503, detail="Cloud code is not initialized")
    return hooks


def verify_webhook_key(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> None:
    """Reject calls without the configured webhook key (no-op when none is configured)."""
    if settings.parse_webhook_key is None:
        return
    expected = settings.parse_webhook_key.get_secret_value()
    supplied = request.headers.get(settings.webhook_key_header, "")
    if not hmac.compare_digest(supplied.encode(), expected.encode()):
        raise HTTPException(status_code=401, detail="Invalid webhook key")


CloudHooksDep = Annotated[CloudHooks, Depends(get_cloud_hooks)]
