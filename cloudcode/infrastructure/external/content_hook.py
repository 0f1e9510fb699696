"""Outbound call to a site's content hook after content changes."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from cloudcode.infrastructure.exceptions import ContentHookException

logger = logging.getLogger(__name__)


class HttpContentHookClient:
    """GETs a content hook URL and returns its JSON (or text) body."""

    def __init__(self, http: httpx.AsyncClient, timeout: float = 10.0) -> None:
        self._http = http
        self._timeout = timeout

    async def call(self, url: str) -> Any:
        try:
            resp = await self._http.get(url, timeout=self._timeout)
        except httpx.HTTPError as e:
            logger.warning("Content hook %s failed: %s", url, e)
            raise ContentHookException(url, None, str(e)) from e
        if resp.status_code != 200:
            logger.warning("Content hook %s responded %s", url, resp.status_code)
            raise ContentHookException(url, resp.status_code)
        try:
            return resp.json()
        except ValueError:
            return resp.text
