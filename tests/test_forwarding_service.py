import httpx
import pytest
from fastapi import Request

from core.headers import CORS_HEADERS
from services.forwarding import ForwardingService, raw_path
from services.upstream import UpstreamClient


def _request(method, raw, query=b"", receive=None):
    scope = {
        "type": "http",
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "server": ("proxy.local", 80),
        "root_path": "",
        "path": raw.decode("latin-1"),
        "raw_path": raw,
        "query_string": query,
        "headers": [(b"content-type", b"application/json"), (b"content-length", b"13")],
    }
    return Request(scope, receive) if receive else Request(scope)


def test_raw_path_keeps_percent_encoding():
    request = _request("GET", b"/botT1/getMe%3Fa%3D1")

    assert raw_path(request) == "/botT1/getMe%3Fa%3D1"


def test_raw_path_drops_query_if_server_includes_it():
    request = _request("GET", b"/botT1/getMe?x=1", query=b"x=1")

    assert raw_path(request) == "/botT1/getMe"


@pytest.mark.asyncio
async def test_client_disconnect_while_streaming_body(logger):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200)

    async def receive():
        return {"type": "http.disconnect"}

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        service = ForwardingService("https://upstream.test", UpstreamClient(client), logger)

        response = await service.handle(_request("POST", b"/botT1/sendMessage", receive=receive))

    assert response.status_code == 499
    assert response.body == b""
    for key, value in CORS_HEADERS.items():
        assert response.headers[key] == value
    assert calls == []
    assert logger.requests == [("POST", "/bot***/sendMessage", "client_disconnect", 499)]
