import pytest

from spotify_mcp.auth import (
    AuthorizationFlow,
    MemoryStore,
    SpotifyOAuthHandler,
    TokenRefresher,
)
from spotify_mcp.dispatcher import ToolDispatcher
from spotify_mcp.spotify_client import SpotifyClient

TOKEN_URL = "https://accounts.spotify.com/api/token"
API = "https://api.spotify.com/v1"
REDIRECT_URI = "http://127.0.0.1:8000/auth/callback"


class FakeClock:
    """Manually advanced stand-in for time.time."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def token_response(access_token="access-1", refresh_token="refresh-1", expires_in=3600):
    body = {
        "access_token": access_token,
        "token_type": "Bearer",
        "expires_in": expires_in,
        "scope": "user-library-read user-library-modify",
    }
    if refresh_token:
        body["refresh_token"] = refresh_token
    return body


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def oauth_handler():
    return SpotifyOAuthHandler(
        client_id="test-client-id",
        client_secret="test-client-secret",
        redirect_uri=REDIRECT_URI,
    )


@pytest.fixture
def sessions():
    return MemoryStore()


@pytest.fixture
def pending():
    return MemoryStore()


@pytest.fixture
def refresher(sessions, oauth_handler, clock):
    return TokenRefresher(sessions, oauth_handler, clock=clock)


@pytest.fixture
def authorization(oauth_handler, refresher, pending, clock):
    return AuthorizationFlow(oauth_handler, refresher, pending, clock=clock)


@pytest.fixture
def client(refresher):
    return SpotifyClient(refresher, timeout=5)


@pytest.fixture
def dispatcher(client, refresher, authorization):
    return ToolDispatcher(client, refresher, authorization)


@pytest.fixture
def connected(refresher):
    """Session id that already holds a valid access token."""
    refresher.store_tokens("user-1", token_response())
    return "user-1"
