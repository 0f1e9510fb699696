"""Thin Parse Server REST API client.

Implements IDocumentStore over /classes and /users with the master key.
All HTTP calls use httpx.AsyncClient so they do not block the event loop.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from cloudcode.application.dtos.document import Document, Pointer
from cloudcode.application.dtos.query import Query
from cloudcode.core.constants import CLASS_USER
from cloudcode.domain.exceptions import ObjectNotFoundException, StoreRequestException
from cloudcode.domain.value_objects.acl import ACL
from cloudcode.infrastructure.parse._rest_encoding import (
    decode_document,
    encode_document,
    encode_where,
)

logger = logging.getLogger(__name__)

# Parse error code for "object not found"
_OBJECT_NOT_FOUND = 101


def _error_from_response(resp: httpx.Response) -> StoreRequestException:
    """Build a StoreRequestException from a Parse error body ({code, error})."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        return StoreRequestException(
            resp.status_code,
            str(body.get("error") or resp.text),
            body.get("code"),
        )
    return StoreRequestException(resp.status_code, resp.text or resp.reason_phrase)


class ParseRESTClient:
    """Lightweight Parse Server client (REST, master key)."""

    def __init__(
        self,
        server_url: str,
        app_id: str,
        master_key: str,
        *,
        page_size: int = 1000,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._server_url = server_url.rstrip("/")
        self._headers = {
            "Content-Type": "application/json",
            "X-Parse-Application-Id": app_id,
            "X-Parse-Master-Key": master_key,
        }
        self._page_size = page_size
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    @property
    def server_url(self) -> str:
        return self._server_url

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._headers)

    @property
    def http(self) -> httpx.AsyncClient:
        return self._http

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    @staticmethod
    def _class_path(class_name: str) -> str:
        if class_name == CLASS_USER:
            return "/users"
        return f"/classes/{class_name}"

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        try:
            resp = await self._http.request(
                method,
                f"{self._server_url}{path}",
                headers=self._headers,
                params=params,
                json=body,
            )
        except httpx.HTTPError as e:
            raise StoreRequestException(0, f"{method} {path} failed: {e}") from e
        if resp.status_code not in (200, 201):
            raise _error_from_response(resp)
        return resp

    @staticmethod
    def _query_params(query: Query) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if query.where:
            params["where"] = json.dumps(encode_where(query.where))
        if query.order_by:
            params["order"] = query.order_by
        if query.limit_value is not None:
            params["limit"] = query.limit_value
        if query.skip_value:
            params["skip"] = query.skip_value
        return params

    async def get(self, class_name: str, object_id: str) -> Document:
        """Fetch one document; raise ObjectNotFoundException if missing."""
        try:
            resp = await self._request("GET", f"{self._class_path(class_name)}/{object_id}")
        except StoreRequestException as e:
            if e.status == 404 or e.parse_code == _OBJECT_NOT_FOUND:
                raise ObjectNotFoundException(class_name, object_id) from None
            raise
        return decode_document(class_name, resp.json())

    async def fetch(self, ref: Pointer | Document) -> Document:
        if ref.object_id is None:
            raise ValueError(f"Cannot fetch unsaved {ref.class_name}")
        return await self.get(ref.class_name, ref.object_id)

    async def find(self, query: Query) -> list[Document]:
        """Return one page of results (query limit/skip apply)."""
        resp = await self._request(
            "GET", self._class_path(query.class_name), params=self._query_params(query)
        )
        return [
            decode_document(query.class_name, raw)
            for raw in resp.json().get("results", [])
        ]

    async def find_all(self, query: Query) -> list[Document]:
        """Page through every match with skip/limit until a short page comes back.

        Pages are ordered by objectId unless the query sets an order, so skip
        offsets stay stable across requests.
        """
        results: list[Document] = []
        skip = query.skip_value
        while True:
            page_query = Query(
                class_name=query.class_name,
                where=query.where,
                order_by=query.order_by or "objectId",
                limit_value=self._page_size,
                skip_value=skip,
            )
            page = await self.find(page_query)
            results.extend(page)
            if len(page) < self._page_size:
                return results
            skip += self._page_size

    async def first(self, query: Query) -> Document | None:
        page = await self.find(
            Query(
                class_name=query.class_name,
                where=query.where,
                order_by=query.order_by,
                limit_value=1,
                skip_value=query.skip_value,
            )
        )
        return page[0] if page else None

    async def count(self, query: Query) -> int:
        params = self._query_params(query)
        params.update({"count": 1, "limit": 0})
        resp = await self._request("GET", self._class_path(query.class_name), params=params)
        return int(resp.json().get("count", 0))

    async def save(self, document: Document) -> Document:
        """Create (POST) when new, else update (PUT). Returns the same document with its id set."""
        body = encode_document(document)
        path = self._class_path(document.class_name)
        if document.object_id is None:
            resp = await self._request("POST", path, body=body)
            document.object_id = resp.json()["objectId"]
            logger.debug("Created %s/%s", document.class_name, document.object_id)
        else:
            await self._request("PUT", f"{path}/{document.object_id}", body=body)
        return document

    async def save_acl(self, ref: Pointer | Document, acl: ACL) -> None:
        """PUT only the ACL key so fields changed by others since the read survive."""
        if ref.object_id is None:
            raise ValueError(f"Cannot update ACL of unsaved {ref.class_name}")
        await self._request(
            "PUT",
            f"{self._class_path(ref.class_name)}/{ref.object_id}",
            body={"ACL": acl.to_dict()},
        )

    async def destroy(self, ref: Pointer | Document) -> None:
        if ref.object_id is None:
            raise ValueError(f"Cannot destroy unsaved {ref.class_name}")
        try:
            await self._request("DELETE", f"{self._class_path(ref.class_name)}/{ref.object_id}")
        except StoreRequestException as e:
            if e.status == 404 or e.parse_code == _OBJECT_NOT_FOUND:
                raise ObjectNotFoundException(ref.class_name, ref.object_id) from None
            raise
