from core.headers import CORS_HEADERS, HeaderBuilder


def test_build_upstream_headers_keeps_allowed_subset():
    headers = [
        ("Content-Type", "application/json"),
        ("Accept", "application/json"),
        ("Accept-Language", "de"),
        ("Content-Length", "12"),
        ("Authorization", "Bearer secret"),
        ("X-Api-Key", "secret"),
        ("x-foo", "bar"),
        ("Host", "proxy.local"),
    ]

    upstream = HeaderBuilder().build_upstream_headers(headers)

    assert upstream == {
        "content-type": "application/json",
        "accept": "application/json",
        "accept-language": "de",
        "content-length": "12",
    }


def test_build_upstream_headers_drops_content_length_without_body():
    headers = [("content-type", "text/plain"), ("content-length", "3")]

    upstream = HeaderBuilder().build_upstream_headers(headers, with_body=False)

    assert upstream == {"content-type": "text/plain"}


def test_relay_headers_strips_hop_by_hop():
    headers = [
        ("Content-Type", "application/json"),
        ("Transfer-Encoding", "chunked"),
        ("Connection", "keep-alive"),
        ("Set-Cookie", "a=1"),
        ("Set-Cookie", "b=2"),
    ]

    relayed = HeaderBuilder().relay_headers(headers)

    assert relayed == [
        ("Content-Type", "application/json"),
        ("Set-Cookie", "a=1"),
        ("Set-Cookie", "b=2"),
    ]


def test_apply_cors_overwrites_existing_values():
    headers = {"Access-Control-Allow-Origin": "https://example.org", "X-Other": "1"}

    HeaderBuilder().apply_cors(headers)

    assert headers["Access-Control-Allow-Origin"] == "*"
    assert headers["X-Other"] == "1"
    for key, value in CORS_HEADERS.items():
        assert headers[key] == value
