"""Forwarding pipeline: policy checks, upstream dispatch and response relay."""

from collections.abc import AsyncIterator

import httpx
from fastapi import Request, Response
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.background import BackgroundTask
from starlette.requests import ClientDisconnect

from core.exceptions import UpstreamError
from core.headers import CORS_HEADERS, HeaderBuilder
from core.policy import TokenAllowlist
from core.protocols import RequestLogger
from core.request_types import PreparedRequest
from core.router import RouteDecider, RouteKind
from services.upstream import UpstreamClient
from ui.log_utils import mask_path

SERVICE_NAME = "telegram-api-proxy"

HEALTH_BODY = {
    "status": "ok",
    "service": SERVICE_NAME,
    "usage": "Replace api.telegram.org with this worker URL",
}
INVALID_PATH_BODY = {
    "error": "Invalid path. Expected /bot<token>/<method>",
    "example": "/botYOUR_TOKEN/sendMessage",
}
FORBIDDEN_BODY = {"error": "Token not in allowlist"}
UPSTREAM_ERROR_LABEL = "Failed to proxy request to Telegram"

BODYLESS_METHODS = frozenset({"GET", "HEAD"})

# nginx convention for a request the client abandoned
CLIENT_CLOSED_REQUEST = 499


class ForwardingService:
    """Turn one inbound request into exactly one response.

    Checks run in order and the first match wins: preflight, health check,
    path shape, token allowlist, then upstream dispatch. Every branch ends in
    a response carrying the CORS header set.
    """

    def __init__(
        self,
        upstream_url: str,
        upstream: UpstreamClient,
        logger: RequestLogger,
        *,
        allowlist: TokenAllowlist | None = None,
        decider: RouteDecider | None = None,
        header_builder: HeaderBuilder | None = None,
    ) -> None:
        self._upstream_url = upstream_url.rstrip("/")
        self._upstream = upstream
        self._logger = logger
        self._allowlist = allowlist or TokenAllowlist()
        self._decider = decider or RouteDecider()
        self._headers = header_builder or HeaderBuilder()

    async def handle(self, request: Request) -> Response:
        method = request.method
        path = raw_path(request)
        decision = self._decider.decide(method, path)

        if decision.kind is RouteKind.PREFLIGHT:
            self._logger.log_request(method, mask_path(path), "preflight", 200)
            return Response(headers=dict(CORS_HEADERS))

        if decision.kind is RouteKind.HEALTH:
            self._logger.log_request(method, path, "health", 200)
            return self._json(HEALTH_BODY)

        if decision.kind is RouteKind.INVALID_PATH:
            self._logger.log_request(method, mask_path(path), "invalid_path", 400)
            return self._json(INVALID_PATH_BODY, status_code=400)

        bot_path = decision.bot_path
        # An empty token segment yields no token, so the allowlist does not apply
        if bot_path and bot_path.token and not self._allowlist.permits(bot_path.token):
            self._logger.log_request(method, mask_path(path), "forbidden", 403)
            return self._json(FORBIDDEN_BODY, status_code=403)

        prepared = self.prepare(request)
        try:
            upstream_response = await self._upstream.send(prepared)
        except ClientDisconnect:
            self._logger.log_request(method, mask_path(path), "client_disconnect", CLIENT_CLOSED_REQUEST)
            return Response(status_code=CLIENT_CLOSED_REQUEST, headers=dict(CORS_HEADERS))
        except UpstreamError as e:
            self._logger.log_error("Telegram", 502, e.message)
            return self._json(
                {"error": UPSTREAM_ERROR_LABEL, "message": e.message},
                status_code=502,
            )

        self._logger.log_request(method, mask_path(path), "proxied", upstream_response.status_code)
        return self._relay(upstream_response)

    def prepare(self, request: Request) -> PreparedRequest:
        """Build the outbound request: same method, path and query, filtered headers."""
        method = request.method
        with_body = method.upper() not in BODYLESS_METHODS
        target_url = f"{self._upstream_url}{raw_path(request)}"
        if request.url.query:
            target_url += f"?{request.url.query}"

        body: AsyncIterator[bytes] | None = request.stream() if with_body else None
        headers = self._headers.build_upstream_headers(
            request.headers.items(), with_body=with_body
        )
        return PreparedRequest(method, target_url, headers, body)

    def _relay(self, upstream_response: httpx.Response) -> StreamingResponse:
        """Stream the upstream response back unbuffered, with CORS headers applied."""
        consumed = upstream_response.is_stream_consumed
        if consumed:
            # Already read (e.g. a response built from in-memory content)
            content = _replay(upstream_response.content)
        else:
            content = upstream_response.aiter_raw()
        response = StreamingResponse(
            content,
            status_code=upstream_response.status_code,
            background=BackgroundTask(self._upstream.close_response, upstream_response),
        )
        for key, value in self._headers.relay_headers(upstream_response.headers.multi_items()):
            response.headers.append(key, value)
        if consumed:
            # .content is decoded, so the framing must describe the decoded bytes
            if "content-encoding" in response.headers:
                del response.headers["content-encoding"]
            response.headers["content-length"] = str(len(upstream_response.content))
        self._headers.apply_cors(response.headers)
        return response

    def _json(self, body: dict[str, str], status_code: int = 200) -> JSONResponse:
        return JSONResponse(body, status_code=status_code, headers=dict(CORS_HEADERS))


def raw_path(request: Request) -> str:
    """Return the path exactly as sent by the client, percent-encoding intact."""
    raw = request.scope.get("raw_path")
    if not raw:
        return request.url.path
    # Some servers include the query string in raw_path
    return raw.split(b"?", 1)[0].decode("latin-1")


async def _replay(content: bytes) -> AsyncIterator[bytes]:
    yield content
