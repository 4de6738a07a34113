"""FastAPI route handlers."""

from fastapi import Request, Response


async def handle_proxy(request: Request) -> Response:
    """Handle every inbound request through the forwarding pipeline."""
    forwarding_service = request.app.state.forwarding_service
    return await forwarding_service.handle(request)
