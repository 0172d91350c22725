"""
Test configuration and fixtures.
"""
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from pkce_broker.config.settings import Settings
from pkce_broker.main import create_app
from pkce_broker.services.auth_service import AuthService
from pkce_broker.services.provider_client import ProviderClient
from pkce_broker.utils.state_store import InMemoryTransactionStore

from .constants import AUTHORIZE_URL, TOKEN_URL


class FakeClock:
    """Controllable replacement for time.monotonic."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TokenEndpoint:
    """Stand-in for the provider token endpoint behind an httpx.MockTransport."""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.payload = {
            "access_token": "sl.access",
            "token_type": "bearer",
            "expires_in": 14400,
            "refresh_token": "refresh",
            "scope": "files.metadata.read",
            "account_id": "dbid:abc",
        }
        self.content = None
        self.error = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def last_body(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def test_settings():
    """Test settings fixture."""
    return Settings(
        _env_file=None,
        authorize_url=AUTHORIZE_URL,
        token_url=TOKEN_URL,
        state_ttl_seconds=600,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(test_settings, clock):
    return InMemoryTransactionStore(ttl_seconds=test_settings.state_ttl_seconds, clock=clock)


@pytest.fixture
def token_endpoint():
    return TokenEndpoint()


@pytest.fixture
def provider(test_settings, token_endpoint):
    return ProviderClient(test_settings, transport=token_endpoint.transport)


@pytest.fixture
def auth_service(store, provider, test_settings):
    return AuthService(store=store, provider=provider, settings=test_settings)


@pytest.fixture
def client(test_settings, store, token_endpoint):
    """Test client fixture."""
    app = create_app(settings=test_settings, store=store, transport=token_endpoint.transport)
    return TestClient(app)
