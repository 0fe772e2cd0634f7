from .authorization import AuthorizationFlow, CallbackPage
from .oauth_handler import SpotifyOAuthHandler
from .token_refresher import TokenRefresher
from .token_store import (
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    PendingAuthorization,
    Session,
    create_session_store,
)

__all__ = [
    "AuthorizationFlow",
    "CallbackPage",
    "SpotifyOAuthHandler",
    "TokenRefresher",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "PendingAuthorization",
    "Session",
    "create_session_store",
]
