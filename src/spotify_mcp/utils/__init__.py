from .config import (
    get_spotify_config,
    get_request_timeout,
    get_session_store_path,
    get_server_config,
    SPOTIFY_API_BASE,
    SPOTIFY_AUTHORIZE_URL,
    SPOTIFY_TOKEN_URL,
    DEFAULT_REDIRECT_URI,
    PENDING_AUTH_MAX_AGE,
)

__all__ = [
    "get_spotify_config",
    "get_request_timeout",
    "get_session_store_path",
    "get_server_config",
    "SPOTIFY_API_BASE",
    "SPOTIFY_AUTHORIZE_URL",
    "SPOTIFY_TOKEN_URL",
    "DEFAULT_REDIRECT_URI",
    "PENDING_AUTH_MAX_AGE",
]
