"""Schema administration for dynamically named content tables (/schemas/{table})."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from cloudcode.domain.enums import SchemaMethod
from cloudcode.domain.exceptions import SchemaOperationException
from cloudcode.infrastructure.parse._rest_client import ParseRESTClient

logger = logging.getLogger(__name__)


class ParseSchemaGateway:
    """Implements ISchemaGateway on the Parse schema endpoint (master key).

    Only status 200 counts as success; reads treat any failure as "no schema".
    """

    def __init__(self, client: ParseRESTClient) -> None:
        self._client = client

    def _url(self, table: str) -> str:
        return f"{self._client.server_url}/schemas/{table}"

    async def _send(
        self, method: str, table: str, body: dict[str, Any] | None = None
    ) -> httpx.Response:
        try:
            resp = await self._client.http.request(
                method, self._url(table), headers=self._client.headers, json=body
            )
        except httpx.HTTPError as e:
            raise SchemaOperationException(table, method, None) from e
        if resp.status_code != 200:
            raise SchemaOperationException(table, method, resp.status_code)
        return resp

    async def fetch_schema(self, table: str) -> dict[str, Any] | None:
        """Return the schema ({className, fields, classLevelPermissions}) or None."""
        try:
            resp = await self._send("GET", table)
            return resp.json()
        except (SchemaOperationException, ValueError) as e:
            logger.debug("Schema lookup for %s returned nothing: %s", table, e)
            return None

    async def apply_schema(
        self,
        table: str,
        patch: dict[str, Any],
        method: SchemaMethod = SchemaMethod.CREATE,
    ) -> None:
        """POST creates the table with the patch; PUT updates an existing one."""
        await self._send(method.value, table, patch)

    async def delete_schema(self, table: str) -> None:
        await self._send("DELETE", table)
