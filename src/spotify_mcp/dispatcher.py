"""Tool dispatch: authentication gate, argument validation, and the per-tool handlers."""

import logging
from typing import Callable, Dict, List

from mcp.types import CallToolResult, TextContent, Tool
from pydantic import BaseModel, ValidationError

from .auth.authorization import AuthorizationFlow
from .auth.oauth_handler import SpotifyOAuthHandler
from .auth.token_refresher import TokenRefresher
from .auth.token_store import MemoryStore, create_session_store
from .errors import InvalidArgument, NotAuthenticated, SpotifyMCPError, UnknownTool
from .formats import count_results, format_playlist_track, format_search_results
from .schemas.tool_arguments import FetchTracksArguments, LibraryItemArguments, SearchArguments
from .spotify_client import SpotifyClient
from .tools import AUDIOBOOK_REFUSAL, TOOLS
from .utils.config import get_session_store_path
from .widgets import SEARCH_WIDGET, widget_meta

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_TYPES = ["track", "album", "artist", "playlist"]
DEFAULT_SEARCH_LIMIT = 20
MAX_SEARCH_LIMIT = 50
DEFAULT_MARKET = "US"

DEFAULT_PLAYLIST_LIMIT = 100
MAX_PLAYLIST_LIMIT = 100

# /me/tracks/contains accepts at most 50 ids per call
SAVED_STATUS_BATCH = 50

# item type -> library endpoint taking {"ids": [...]}
LIBRARY_ENDPOINTS = {
    "track": "/me/tracks",
    "album": "/me/albums",
    "artist": "/me/following?type=artist",
    "show": "/me/shows",
    "episode": "/me/episodes",
}


def text_result(text: str, is_error: bool = False) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=is_error)


def clamp_limit(limit, default: int, maximum: int) -> int:
    if not limit or limit < 1:
        return default
    return min(limit, maximum)


def parse_arguments(model: type[BaseModel], arguments: dict) -> BaseModel:
    try:
        return model.model_validate(arguments or {})
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'arguments'}: {err['msg']}"
            for err in e.errors()
        )
        raise InvalidArgument(f"Invalid arguments: {problems}") from e


class ToolDispatcher:
    """Routes MCP tool calls for a session to the Spotify Web API."""

    def __init__(self, client: SpotifyClient, refresher: TokenRefresher, authorization: AuthorizationFlow):
        self.client = client
        self.refresher = refresher
        self.authorization = authorization
        self._handlers: Dict[str, Callable[[str, dict], CallToolResult]] = {
            "search": self.handle_search,
            "add_to_library": self.handle_add_to_library,
            "remove_from_library": self.handle_remove_from_library,
            "fetch_tracks": self.handle_fetch_tracks,
        }

    def list_tools(self) -> List[Tool]:
        return list(TOOLS)

    def authorization_prompt(self, session_id: str) -> CallToolResult:
        auth_url = self.authorization.begin(session_id)
        return text_result(f"Please authenticate with Spotify to use this feature. Visit: {auth_url}")

    def call_tool(self, session_id: str, name: str, arguments: dict) -> CallToolResult:
        """Execute one tool call; failures come back as ``isError`` results, never as exceptions."""
        if not self.refresher.has_session(session_id):
            logger.info("Session %s is not connected to Spotify, prompting for authorization", session_id)
            return self.authorization_prompt(session_id)

        try:
            handler = self._handlers.get(name)
            if handler is None:
                raise UnknownTool(name)
            return handler(session_id, arguments or {})
        except NotAuthenticated:
            return self.authorization_prompt(session_id)
        except SpotifyMCPError as e:
            logger.warning("Tool %s failed for session %s: %s", name, session_id, e)
            return text_result(str(e), is_error=True)

    def handle_search(self, session_id: str, arguments: dict) -> CallToolResult:
        args = parse_arguments(SearchArguments, arguments)

        if "audiobook" in args.query.lower():
            return text_result(AUDIOBOOK_REFUSAL)

        types = args.types or DEFAULT_SEARCH_TYPES
        response = self.client.request(
            session_id,
            "/search",
            params={
                "q": args.query,
                "type": ",".join(types),
                "limit": clamp_limit(args.limit, DEFAULT_SEARCH_LIMIT, MAX_SEARCH_LIMIT),
                "market": args.market or DEFAULT_MARKET,
            },
        )
        results = format_search_results(response or {})

        return CallToolResult(
            content=[TextContent(
                type="text",
                text=f'Found {count_results(results)} results for "{args.query}".',
            )],
            structuredContent={"query": args.query, "results": results},
            _meta=widget_meta(SEARCH_WIDGET),
        )

    def _update_library(self, session_id: str, arguments: dict, method: str) -> LibraryItemArguments:
        args = parse_arguments(LibraryItemArguments, arguments)

        if args.itemType == "playlist":
            # Playlists live in the library by following them
            self.client.request(session_id, f"/playlists/{args.itemId}/followers", method)
        else:
            endpoint = LIBRARY_ENDPOINTS[args.itemType]
            self.client.request(session_id, endpoint, method, body={"ids": [args.itemId]})
        return args

    def handle_add_to_library(self, session_id: str, arguments: dict) -> CallToolResult:
        args = self._update_library(session_id, arguments, "PUT")
        return text_result(f"Successfully added {args.itemType} to your library.")

    def handle_remove_from_library(self, session_id: str, arguments: dict) -> CallToolResult:
        args = self._update_library(session_id, arguments, "DELETE")
        return text_result(f"Successfully removed {args.itemType} from your library.")

    def _saved_status(self, session_id: str, track_ids: List[str]) -> List[bool]:
        saved: List[bool] = []
        for start in range(0, len(track_ids), SAVED_STATUS_BATCH):
            batch = track_ids[start:start + SAVED_STATUS_BATCH]
            saved.extend(self.client.request(
                session_id, "/me/tracks/contains", params={"ids": ",".join(batch)}
            ) or [])
        return saved

    def handle_fetch_tracks(self, session_id: str, arguments: dict) -> CallToolResult:
        args = parse_arguments(FetchTracksArguments, arguments)

        page = self.client.request(
            session_id,
            f"/playlists/{args.playlistId}/tracks",
            params={
                "offset": args.offset or 0,
                "limit": clamp_limit(args.limit, DEFAULT_PLAYLIST_LIMIT, MAX_PLAYLIST_LIMIT),
            },
        ) or {}
        items = page.get("items") or []

        track_ids = [(item.get("track") or {}).get("id") for item in items]
        known_ids = [track_id for track_id in track_ids if track_id]
        saved_by_position = iter(self._saved_status(session_id, known_ids))

        tracks = []
        for item, track_id in zip(items, track_ids):
            is_saved = next(saved_by_position, False) if track_id else False
            tracks.append(format_playlist_track(item, is_saved))

        return CallToolResult(
            content=[TextContent(type="text", text=f"Loaded {len(tracks)} tracks from playlist.")],
            structuredContent={
                "playlistId": args.playlistId,
                "tracks": tracks,
                "total": page.get("total", len(tracks)),
            },
        )


def create_dispatcher(oauth_handler=None, sessions=None, pending=None) -> ToolDispatcher:
    """Factory function wiring stores, OAuth handler, refresher and client into a dispatcher.

    Args:
        oauth_handler: Optional SpotifyOAuthHandler (built from the environment if not provided)
        sessions: Optional session store (memory, or JSON file when SPOTIFY_SESSION_STORE_PATH is set)
        pending: Optional pending-authorization store (memory)

    Returns:
        Configured ToolDispatcher
    """
    oauth_handler = oauth_handler or SpotifyOAuthHandler()
    sessions = sessions if sessions is not None else create_session_store(get_session_store_path())
    pending = pending if pending is not None else MemoryStore()

    refresher = TokenRefresher(sessions, oauth_handler)
    authorization = AuthorizationFlow(oauth_handler, refresher, pending)
    client = SpotifyClient(refresher)
    return ToolDispatcher(client, refresher, authorization)
