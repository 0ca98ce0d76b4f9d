"""Tests for the client wiring of provider, session cache and API client."""

import time

import httpx
import jwt
import pytest

from src.client import ClientSession, SignInRequiredError, create_client
from src.core.infrastructure.data_service import DataServiceGateway
from src.modules.auth.application.session_cache import CacheState

pytestmark = pytest.mark.anyio

SIGNING_KEY = "unit-test-signing-key-with-enough-bytes"
PROFILE = {
    "user_id": "user-1",
    "email": "reader@example.com",
    "enable_email_delivery": True,
    "brief_language": "English",
    "join_date": None,
    "pricing_plan": "Free",
}


class FakeBackend:
    """Answers both the data service auth endpoints and the briefing API."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/auth/v1/token":
            token = jwt.encode(
                {"sub": "user-1", "exp": int(time.time()) + 3600},
                SIGNING_KEY,
                algorithm="HS256",
            )
            return httpx.Response(
                200,
                json={
                    "access_token": token,
                    "refresh_token": "refresh-1",
                    "token_type": "bearer",
                    "user": {"id": "user-1", "email": "reader@example.com"},
                },
            )
        if path == "/auth/v1/logout":
            return httpx.Response(204)
        if path == "/api/profile/user":
            return httpx.Response(200, json=PROFILE)
        if path == "/api/briefs":
            return httpx.Response(200, json=[])
        return httpx.Response(404)

    def paths(self) -> list[str]:
        return [request.url.path for request in self.requests]


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
async def client(backend):
    http = httpx.AsyncClient(transport=httpx.MockTransport(backend))
    gateway = DataServiceGateway(
        http,
        base_url="http://data.test",
        anon_key="anon-key",
        service_key="service-key",
    )
    session = create_client("http://api.test/api", gateway, http=http)
    async with session:
        yield session
    await http.aclose()


async def test_start_without_session_stays_signed_out(
    client: ClientSession, backend
) -> None:
    assert await client.start() is None

    assert client.cache.state == CacheState.INVALID
    assert backend.requests == []


async def test_sign_in_fills_cache_and_loads_profile(
    client: ClientSession, backend
) -> None:
    session = await client.sign_in("reader@example.com", "secret")

    assert client.cache.state == CacheState.VALID
    assert client.cache.entry is not None
    assert client.cache.entry.session == session
    assert backend.paths() == ["/auth/v1/token", "/api/profile/user"]
    assert (
        backend.requests[-1].headers["Authorization"]
        == f"Bearer {session.access_token}"
    )


async def test_sign_out_clears_cache(client: ClientSession, backend) -> None:
    await client.sign_in("reader@example.com", "secret")

    await client.sign_out()

    assert client.cache.entry is None
    assert client.cache.state == CacheState.EMPTY
    with pytest.raises(SignInRequiredError):
        await client.api.list_briefs()
    assert backend.paths()[-1] == "/auth/v1/logout"


async def test_start_with_restored_session_loads_profile(
    client: ClientSession, backend
) -> None:
    session = await client.sign_in("reader@example.com", "secret")

    assert await client.start() == session
    assert backend.paths().count("/api/profile/user") == 2


async def test_closed_client_stops_following_auth_events(
    client: ClientSession,
) -> None:
    await client.aclose()

    await client.provider.sign_in_with_password("reader@example.com", "secret")

    assert client.cache.entry is None
