"""Templated email delivery for invites.

MailgunEmailSender posts to the Mailgun messages API with a stored
template; LogOnlyEmailSender is used when no Mailgun key is configured.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from cloudcode.infrastructure.exceptions import EmailDeliveryException

logger = logging.getLogger(__name__)

MAILGUN_API_URL = "https://api.mailgun.net/v3"


class MailgunEmailSender:
    """IEmailSender over the Mailgun HTTP API (basic auth ``api:<key>``)."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        api_key: str,
        domain: str,
        from_address: str,
        api_url: str = MAILGUN_API_URL,
        timeout: float = 10.0,
    ) -> None:
        self._http = http
        self._auth = ("api", api_key)
        self._url = f"{api_url.rstrip('/')}/{domain}/messages"
        self._from_address = from_address
        self._timeout = timeout

    async def send_template(
        self, template: str, recipient: str, variables: dict[str, Any]
    ) -> None:
        data = {
            "from": self._from_address,
            "to": recipient,
            "template": template,
            "h:X-Mailgun-Variables": json.dumps(variables),
        }
        try:
            resp = await self._http.post(
                self._url, auth=self._auth, data=data, timeout=self._timeout
            )
        except httpx.HTTPError as e:
            logger.warning("Email %s to %s failed: %s", template, recipient, e)
            raise EmailDeliveryException(recipient, None, str(e)) from e
        if resp.status_code != 200:
            logger.warning(
                "Email %s to %s refused with %s: %s",
                template,
                recipient,
                resp.status_code,
                resp.text[:200],
            )
            raise EmailDeliveryException(recipient, resp.status_code)
        logger.info("Email %s sent to %s", template, recipient)


class LogOnlyEmailSender:
    """IEmailSender that logs instead of sending.

    Use when no mail provider is configured (local runs, tests).
    """

    async def send_template(
        self, template: str, recipient: str, variables: dict[str, Any]
    ) -> None:
        logger.info("Email %s: would send to %s", template, recipient)
        logger.debug("Email %s variables: %s", template, variables)
