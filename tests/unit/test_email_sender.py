"""Tests for invite email delivery and sender selection."""

import base64
import json
from urllib.parse import parse_qs

import httpx
import pytest

from cloudcode.api.v1.dependencies import build_email_sender
from cloudcode.core.config import Settings
from cloudcode.infrastructure.exceptions import EmailDeliveryException
from cloudcode.infrastructure.external import LogOnlyEmailSender, MailgunEmailSender

VARIABLES = {"siteName": "Acme", "emailSelf": "o@example.com", "link": "https://app/sign"}


def _sender(handler) -> MailgunEmailSender:
    return MailgunEmailSender(
        httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        api_key="key-123",
        domain="mg.example.com",
        from_address="CMS <no-reply@example.com>",
    )


async def test_posts_template_to_mailgun() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "<1@mg>", "message": "Queued. Thank you."})

    await _sender(handler).send_template("inviteEmail", "new@example.com", VARIABLES)

    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.mailgun.net/v3/mg.example.com/messages"
    expected_auth = base64.b64encode(b"api:key-123").decode()
    assert request.headers["Authorization"] == f"Basic {expected_auth}"
    form = {key: values[0] for key, values in parse_qs(request.content.decode()).items()}
    assert form["from"] == "CMS <no-reply@example.com>"
    assert form["to"] == "new@example.com"
    assert form["template"] == "inviteEmail"
    assert json.loads(form["h:X-Mailgun-Variables"]) == VARIABLES


async def test_refused_send_raises() -> None:
    sender = _sender(lambda request: httpx.Response(401, text="Forbidden"))
    with pytest.raises(EmailDeliveryException) as exc_info:
        await sender.send_template("inviteEmail", "new@example.com", VARIABLES)
    assert exc_info.value.status == 401
    assert exc_info.value.details["recipient"] == "new@example.com"


async def test_transport_error_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(EmailDeliveryException) as exc_info:
        await _sender(handler).send_template("inviteEmail", "new@example.com", VARIABLES)
    assert exc_info.value.status is None
    assert "refused" in exc_info.value.message


async def test_log_only_sender_does_not_raise() -> None:
    await LogOnlyEmailSender().send_template("inviteEmail", "new@example.com", VARIABLES)


async def test_sender_selection() -> None:
    http = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
    try:
        assert isinstance(build_email_sender(Settings(), http), LogOnlyEmailSender)
        configured = Settings(
            mailgun_api_key="key-123",
            mailgun_domain="mg.example.com",
            from_address="no-reply@example.com",
        )
        assert isinstance(build_email_sender(configured, http), MailgunEmailSender)
    finally:
        await http.aclose()


def test_mailgun_key_requires_domain_and_sender() -> None:
    with pytest.raises(ValueError, match="MAILGUN_DOMAIN"):
        Settings(mailgun_api_key="key-123")
