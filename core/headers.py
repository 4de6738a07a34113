"""Header construction for upstream requests and client responses."""

from collections.abc import Iterable, MutableMapping

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Max-Age": "86400",
}

FORWARDED_REQUEST_HEADERS = frozenset(
    {"content-type", "accept", "accept-language", "content-length"}
)

# RFC 9110 hop-by-hop headers; the serving layer frames the relayed body itself
HOP_BY_HOP = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "trailers",
        "transfer-encoding",
        "upgrade",
    }
)


class HeaderBuilder:
    """Build upstream request headers and client response headers."""

    def build_upstream_headers(
        self,
        headers: Iterable[tuple[str, str]],
        *,
        with_body: bool = True,
    ) -> dict[str, str]:
        """Keep only the allowed request headers; drop content-length without a body."""
        upstream: dict[str, str] = {}
        for key, value in headers:
            key_lower = key.lower()
            if key_lower not in FORWARDED_REQUEST_HEADERS:
                continue
            if key_lower == "content-length" and not with_body:
                continue
            upstream[key_lower] = value
        return upstream

    def relay_headers(self, headers: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
        """Copy upstream response headers, minus hop-by-hop framing."""
        return [(k, v) for k, v in headers if k.lower() not in HOP_BY_HOP]

    def apply_cors(self, headers: MutableMapping[str, str]) -> MutableMapping[str, str]:
        """Set every CORS header, overwriting any existing value."""
        for key, value in CORS_HEADERS.items():
            headers[key] = value
        return headers
