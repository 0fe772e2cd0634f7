"""Argument models for the MCP tools.

Each model mirrors the ``inputSchema`` published for its tool; validation
happens before any Spotify call is made.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ItemType = Literal["track", "album", "artist", "playlist", "show", "episode"]
SearchType = Literal["track", "album", "artist", "playlist", "show", "episode"]


class ToolArguments(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)


class SearchArguments(ToolArguments):
    query: str
    types: Optional[List[SearchType]] = None
    limit: Optional[int] = None
    market: Optional[str] = None


class LibraryItemArguments(ToolArguments):
    """Shared by add_to_library and remove_from_library."""
    itemType: ItemType
    itemId: str = Field(min_length=1)


class FetchTracksArguments(ToolArguments):
    playlistId: str = Field(min_length=1)
    offset: Optional[int] = Field(default=None, ge=0)
    limit: Optional[int] = None
