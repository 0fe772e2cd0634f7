__version__ = "0.1.0"

from .dispatcher import ToolDispatcher, create_dispatcher
from .errors import (
    InvalidArgument,
    NotAuthenticated,
    SpotifyMCPError,
    SpotifyUnavailable,
    TokenExchangeFailed,
    TokenRefreshFailed,
    UnknownTool,
    UpstreamError,
)
from .spotify_client import SpotifyClient

__all__ = [
    "__version__",
    "ToolDispatcher",
    "create_dispatcher",
    "SpotifyClient",
    "SpotifyMCPError",
    "SpotifyUnavailable",
    "NotAuthenticated",
    "TokenRefreshFailed",
    "TokenExchangeFailed",
    "UpstreamError",
    "InvalidArgument",
    "UnknownTool",
]
