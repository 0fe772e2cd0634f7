import os
from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv(usecwd=True))

# Spotify endpoints
SPOTIFY_API_BASE = "https://api.spotify.com/v1"
SPOTIFY_AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"

DEFAULT_REDIRECT_URI = "http://127.0.0.1:8000/auth/callback"

# Pending authorizations older than this are swept on every callback
PENDING_AUTH_MAX_AGE = 10 * 60

# Server config
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8000
DEFAULT_SESSION_ID = "default"


def get_spotify_config() -> dict:
    """Get Spotify OAuth application configuration.

    Returns:
        Dict with client_id, client_secret, redirect_uri
    """
    return {
        "client_id": os.getenv("SPOTIFY_CLIENT_ID"),
        "client_secret": os.getenv("SPOTIFY_CLIENT_SECRET"),
        "redirect_uri": os.getenv("SPOTIFY_REDIRECT_URI") or DEFAULT_REDIRECT_URI,
    }


def get_request_timeout() -> float | None:
    """Timeout in seconds for Spotify Web API calls, or None to wait forever."""
    value = os.getenv("SPOTIFY_REQUEST_TIMEOUT")
    if not value:
        return None
    return float(value)


def get_session_store_path() -> str | None:
    """Path of the JSON file backing the session store, if persistence is enabled."""
    return os.getenv("SPOTIFY_SESSION_STORE_PATH") or None


def get_server_config() -> dict:
    """Get HTTP/stdio server configuration.

    Returns:
        Dict with host, port, session_id
    """
    return {
        "host": os.getenv("HOST") or DEFAULT_HOST,
        "port": int(os.getenv("PORT") or DEFAULT_PORT),
        "session_id": os.getenv("SPOTIFY_MCP_SESSION_ID") or DEFAULT_SESSION_ID,
    }
