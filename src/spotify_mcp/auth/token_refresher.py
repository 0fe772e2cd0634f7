import logging
import threading
import time
from typing import Callable, Dict

from ..errors import NotAuthenticated
from .oauth_handler import SpotifyOAuthHandler
from .token_store import KeyValueStore, Session

logger = logging.getLogger(__name__)


class TokenRefresher:
    """Hands out valid access tokens, refreshing expired ones on read."""

    def __init__(
        self,
        sessions: KeyValueStore[Session],
        oauth_handler: SpotifyOAuthHandler,
        clock: Callable[[], float] = time.time,
    ):
        self.sessions = sessions
        self.oauth_handler = oauth_handler
        self.clock = clock
        # One lock per session that has ever needed a refresh; grows with the session store
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, session_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(session_id, threading.Lock())

    def has_session(self, session_id: str) -> bool:
        return session_id in self.sessions

    def store_tokens(self, session_id: str, token_info: dict) -> Session:
        """Create or replace the session from a token-endpoint response."""
        session = Session.from_token_info(token_info, now=self.clock())
        self.sessions.set(session_id, session)
        return session

    def get_valid_token(self, session_id: str) -> str:
        """Return a usable access token for the session.

        Raises:
            NotAuthenticated: no session stored for this id
            TokenRefreshFailed: the stored token expired and Spotify refused the refresh
        """
        session = self.sessions.get(session_id)
        if session is None:
            raise NotAuthenticated(session_id)
        if not session.is_expired(self.clock()):
            return session.access_token

        with self._lock_for(session_id):
            # Another caller may have refreshed while we waited
            session = self.sessions.get(session_id)
            if session is None:
                raise NotAuthenticated(session_id)
            now = self.clock()
            if session.is_expired(now):
                logger.info("Access token for session %s expired, refreshing", session_id)
                token_info = self.oauth_handler.refresh_access_token(session.refresh_token)
                session = session.renewed(token_info, now=now)
                self.sessions.set(session_id, session)
        return session.access_token
