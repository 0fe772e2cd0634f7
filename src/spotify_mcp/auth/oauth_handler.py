import logging

import requests
from spotipy.cache_handler import MemoryCacheHandler
from spotipy.oauth2 import SpotifyOAuth, SpotifyOauthError

from ..errors import TokenExchangeFailed, TokenRefreshFailed
from ..utils.config import get_spotify_config

logger = logging.getLogger(__name__)


class SpotifyOAuthHandler:
    """Talks to the Spotify accounts service: authorize URLs, code exchange, token refresh.

    Tokens are never cached here; every call gets a throwaway spotipy cache so
    the session store stays the only owner of user tokens.
    """

    def __init__(self, client_id=None, client_secret=None, redirect_uri=None, requests_session=None):
        """Initialize the handler with credentials from arguments or environment variables."""
        config = get_spotify_config()
        self.client_id = client_id or config["client_id"]
        self.client_secret = client_secret or config["client_secret"]
        self.redirect_uri = redirect_uri or config["redirect_uri"]
        self.scope = self._get_required_scopes()

        if not self.client_id or not self.client_secret:
            raise ValueError(
                "Missing Spotify credentials. Please set SPOTIFY_CLIENT_ID and "
                "SPOTIFY_CLIENT_SECRET in your .env file."
            )

        self._session = requests_session or requests.Session()

    def _get_required_scopes(self):
        """Define all required Spotify API scopes."""
        return " ".join([
            # Library
            "user-library-read",
            "user-library-modify",

            # Follows (artists and playlists)
            "user-follow-read",
            "user-follow-modify",

            # Playlists
            "playlist-read-private",
            "playlist-read-collaborative",
            "playlist-modify-public",
            "playlist-modify-private",

            # User data
            "user-read-private",
            "user-read-email",
            "user-top-read",
            "user-read-recently-played",
        ])

    def _oauth(self) -> SpotifyOAuth:
        return SpotifyOAuth(
            client_id=self.client_id,
            client_secret=self.client_secret,
            redirect_uri=self.redirect_uri,
            scope=self.scope,
            show_dialog=True,
            open_browser=False,
            cache_handler=MemoryCacheHandler(),
            requests_session=self._session,
        )

    def get_authorize_url(self, state: str) -> str:
        """Build the Spotify consent URL carrying the CSRF state token."""
        return self._oauth().get_authorize_url(state=state)

    def exchange_code(self, code: str) -> dict:
        """Exchange an authorization code for a token-endpoint response.

        Raises:
            TokenExchangeFailed: Spotify rejected the code or was unreachable
        """
        oauth = self._oauth()
        try:
            oauth.get_access_token(code=code, as_dict=False, check_cache=False)
        except SpotifyOauthError as e:
            logger.warning("Spotify code exchange rejected: %s", e)
            raise TokenExchangeFailed(str(e)) from e
        except requests.exceptions.RequestException as e:
            raise TokenExchangeFailed(str(e)) from e

        # spotipy hands the full response to its cache handler
        token_info = oauth.cache_handler.get_cached_token()
        if not token_info or "access_token" not in token_info:
            raise TokenExchangeFailed("token endpoint returned no access token")
        return token_info

    def refresh_access_token(self, refresh_token: str) -> dict:
        """Trade a refresh token for a new access token.

        Raises:
            TokenRefreshFailed: Spotify rejected the refresh token or was unreachable
        """
        try:
            token_info = self._oauth().refresh_access_token(refresh_token)
        except SpotifyOauthError as e:
            logger.warning("Spotify token refresh rejected: %s", e)
            raise TokenRefreshFailed(str(e)) from e
        except requests.exceptions.RequestException as e:
            raise TokenRefreshFailed(str(e)) from e

        if not token_info or "access_token" not in token_info:
            raise TokenRefreshFailed("token endpoint returned no access token")
        return token_info
