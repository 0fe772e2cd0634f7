"""Authorization-code flow: issuing state tokens and completing the OAuth callback."""

import html
import logging
import secrets
import time
from dataclasses import dataclass
from typing import Callable, Optional

from ..errors import InvalidState, MissingParameter, TokenExchangeFailed
from ..utils.config import PENDING_AUTH_MAX_AGE
from .oauth_handler import SpotifyOAuthHandler
from .token_refresher import TokenRefresher
from .token_store import KeyValueStore, PendingAuthorization

logger = logging.getLogger(__name__)

SUCCESS_PAGE = """<html>
  <body>
    <h1>Successfully Connected to Spotify!</h1>
    <p>You can now close this window and return to your chat.</p>
    <script>
      window.close();
    </script>
  </body>
</html>
"""

ERROR_PAGE = """<html>
  <body>
    <h1>{title}</h1>
    <p>{message}</p>
    <p>Please try again.</p>
  </body>
</html>
"""


@dataclass
class CallbackPage:
    status_code: int
    html: str


def error_page(status_code: int, title: str, message: str) -> CallbackPage:
    return CallbackPage(
        status_code=status_code,
        html=ERROR_PAGE.format(title=html.escape(title), message=html.escape(message)),
    )


class AuthorizationFlow:
    """Links Spotify accounts to MCP sessions.

    ``begin`` is called by the tool gate for sessions without tokens; the
    redirect from Spotify lands in ``handle_callback``.
    """

    def __init__(
        self,
        oauth_handler: SpotifyOAuthHandler,
        refresher: TokenRefresher,
        pending: KeyValueStore[PendingAuthorization],
        max_age: float = PENDING_AUTH_MAX_AGE,
        clock: Callable[[], float] = time.time,
    ):
        self.oauth_handler = oauth_handler
        self.refresher = refresher
        self.pending = pending
        self.max_age = max_age
        self.clock = clock

    def begin(self, session_id: str) -> str:
        """Record a pending authorization for the session and return the consent URL."""
        state = secrets.token_hex(16)
        self.pending.set(state, PendingAuthorization(session_id=session_id, created_at=self.clock()))
        logger.info("Issued authorization state for session %s", session_id)
        return self.oauth_handler.get_authorize_url(state)

    def sweep(self) -> int:
        """Drop pending authorizations older than ``max_age``; returns how many were removed."""
        now = self.clock()
        removed = 0
        for state, pending in self.pending.items():
            if pending.is_stale(now, self.max_age):
                self.pending.delete(state)
                removed += 1
        if removed:
            logger.debug("Swept %d stale authorization states", removed)
        return removed

    def complete(self, code: Optional[str], state: Optional[str]) -> str:
        """Exchange the code and bind the tokens to the originating session.

        Returns:
            The session id now holding tokens

        Raises:
            MissingParameter: code or state absent
            InvalidState: state never issued or already consumed
            TokenExchangeFailed: Spotify refused the code
        """
        if not code or not state:
            raise MissingParameter("Missing code or state parameter")

        pending = self.pending.get(state)
        if pending is None:
            raise InvalidState("Invalid or expired state parameter")

        token_info = self.oauth_handler.exchange_code(code)
        self.refresher.store_tokens(pending.session_id, token_info)
        self.pending.delete(state)
        logger.info("Session %s connected to Spotify", pending.session_id)
        return pending.session_id

    def handle_callback(
        self,
        code: Optional[str],
        state: Optional[str],
        error: Optional[str] = None,
    ) -> CallbackPage:
        """Serve the OAuth redirect: always sweeps, then renders a success or error page."""
        self.sweep()

        if error:
            return error_page(400, "Authentication Failed", f"Error: {error}")

        try:
            self.complete(code, state)
        except (MissingParameter, InvalidState) as e:
            return error_page(400, "Authentication Failed", str(e))
        except TokenExchangeFailed as e:
            logger.error("Failed to exchange code for token: %s", e)
            return error_page(500, "Authentication Error", str(e))

        return CallbackPage(status_code=200, html=SUCCESS_PAGE)
