import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from core.config import AccessSettings, Config, UpstreamSettings

MOCK_UPSTREAM = "https://upstream.test"


class RecordingLogger:
    """In-memory RequestLogger for assertions."""

    def __init__(self):
        self.requests = []
        self.errors = []

    def log_request(self, method, path, outcome, status):
        self.requests.append((method, path, outcome, status))

    def log_error(self, route, status, message):
        self.errors.append((route, status, message))


class RecordingUpstream:
    """MockTransport handler that records requests and returns a fixed reply."""

    def __init__(self, status_code=200, content=b'{"ok":true}', headers=None):
        self.calls: list[httpx.Request] = []
        self.status_code = status_code
        self.content = content
        self.headers = headers or {"content-type": "application/json"}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        return httpx.Response(self.status_code, content=self.content, headers=self.headers)


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def upstream():
    return RecordingUpstream()


@pytest.fixture
def make_upstream():
    return RecordingUpstream


@pytest.fixture
def make_client(logger):
    """Build a TestClient for the proxy wired to a mock upstream handler."""
    clients = []

    def _make(handler, allowed_tokens=None):
        config = Config(
            upstream=UpstreamSettings(base_url=MOCK_UPSTREAM),
            access=AccessSettings(allowed_tokens=allowed_tokens or []),
        )
        app = create_app(config, logger, transport=httpx.MockTransport(handler))
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client, upstream):
    return make_client(upstream)
