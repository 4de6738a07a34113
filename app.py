"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from api.handlers import handle_proxy
from core.config import Config
from core.headers import HeaderBuilder
from core.policy import TokenAllowlist
from core.protocols import RequestLogger
from core.router import RouteDecider
from services.forwarding import ForwardingService
from services.upstream import UpstreamClient

PROXIED_METHODS = ("GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS")


def create_app(
    config: Config,
    logger: RequestLogger,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    `transport` replaces the network transport of the upstream client, which
    lets tests point the proxy at an in-process mock upstream.
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limits = httpx.Limits(
            max_connections=config.upstream.max_connections,
            max_keepalive_connections=config.upstream.max_keepalive_connections,
        )
        telegram_client = httpx.AsyncClient(
            timeout=config.upstream.timeout,
            limits=limits,
            transport=transport,
            follow_redirects=False,
        )
        app.state.upstream_client = UpstreamClient(telegram_client)
        app.state.forwarding_service = ForwardingService(
            config.upstream.base_url,
            app.state.upstream_client,
            logger,
            allowlist=TokenAllowlist.from_tokens(config.access.allowed_tokens),
            decider=RouteDecider(),
            header_builder=HeaderBuilder(),
        )
        try:
            yield
        finally:
            await telegram_client.aclose()

    app = FastAPI(
        title="Telegram API Proxy",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.add_route(
        "/{path:path}",
        handle_proxy,
        methods=list(PROXIED_METHODS),
        include_in_schema=False,
    )

    return app
