import logging
from typing import Any, Optional

import requests

from .auth.token_refresher import TokenRefresher
from .errors import SpotifyUnavailable, UpstreamError
from .utils.config import SPOTIFY_API_BASE, get_request_timeout

logger = logging.getLogger(__name__)


class SpotifyClient:
    """Authenticated calls to the Spotify Web API on behalf of one session at a time."""

    def __init__(
        self,
        refresher: TokenRefresher,
        requests_session: Optional[requests.Session] = None,
        base_url: str = SPOTIFY_API_BASE,
        timeout: Optional[float] = None,
    ):
        self.refresher = refresher
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else get_request_timeout()
        self._session = requests_session or requests.Session()

    def request(
        self,
        session_id: str,
        path: str,
        method: str = "GET",
        body: Any = None,
        params: Optional[dict] = None,
    ) -> Any:
        """Send one API call and return the decoded JSON body.

        Args:
            session_id: MCP session whose Spotify tokens are used
            path: API path below the base URL, e.g. "/me/tracks"
            method: HTTP verb
            body: Optional JSON payload
            params: Optional query parameters

        Returns:
            Parsed JSON, or None for 204 / empty responses

        Raises:
            NotAuthenticated, TokenRefreshFailed: from the token refresher
            UpstreamError: any non-2xx response
            SpotifyUnavailable: connection failure or timeout
        """
        access_token = self.refresher.get_valid_token(session_id)
        logger.debug("Spotify %s %s", method, path)

        try:
            response = self._session.request(
                method,
                f"{self.base_url}{path}",
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Content-Type": "application/json",
                },
                params=params,
                json=body,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.warning("Spotify %s %s could not be sent: %s", method, path, e)
            raise SpotifyUnavailable(str(e)) from e

        if not response.ok:
            logger.warning("Spotify %s %s failed with %s", method, path, response.status_code)
            raise UpstreamError(response.status_code, response.text)

        if response.status_code == 204 or not response.content:
            return None

        return response.json()
