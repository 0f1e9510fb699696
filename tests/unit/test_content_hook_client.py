"""Tests for the outbound content hook call."""

import httpx
import pytest

from cloudcode.infrastructure.exceptions import ContentHookException
from cloudcode.infrastructure.external import HttpContentHookClient

URL = "https://hooks.example.com/rebuild"


def _client(handler) -> HttpContentHookClient:
    return HttpContentHookClient(httpx.AsyncClient(transport=httpx.MockTransport(handler)))


async def test_returns_json_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert str(request.url) == URL
        return httpx.Response(200, json={"build": "queued"})

    assert await _client(handler).call(URL) == {"build": "queued"}


async def test_returns_text_when_not_json() -> None:
    result = await _client(lambda request: httpx.Response(200, text="ok")).call(URL)
    assert result == "ok"


async def test_non_200_raises() -> None:
    with pytest.raises(ContentHookException) as exc_info:
        await _client(lambda request: httpx.Response(503)).call(URL)
    assert exc_info.value.status == 503


async def test_transport_error_raises() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(ContentHookException) as exc_info:
        await _client(handler).call(URL)
    assert exc_info.value.status is None
