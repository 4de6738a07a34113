"""HTTP client for the Telegram Bot API upstream."""

import httpx

from core.exceptions import UpstreamConnectionError, UpstreamTimeoutError
from core.request_types import PreparedRequest

PROVIDER = "telegram"


class UpstreamClient:
    """Send prepared requests upstream and hand back streaming responses."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def send(self, prepared: PreparedRequest) -> httpx.Response:
        """Send the request and return the response with its body unread.

        The caller must close the response once the body has been relayed.
        """
        try:
            req = self._client.build_request(
                prepared.method,
                prepared.target_url,
                headers=prepared.headers,
                content=prepared.body,
            )
            return await self._client.send(req, stream=True)
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(_describe(e), provider=PROVIDER) from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            raise UpstreamConnectionError(_describe(e), provider=PROVIDER) from e

    async def close_response(self, response: httpx.Response) -> None:
        """Clean up streaming resources."""
        await response.aclose()


def _describe(error: Exception) -> str:
    return str(error) or error.__class__.__name__
