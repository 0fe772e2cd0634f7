from .add_to_library import ADD_TO_LIBRARY_TOOL
from .fetch_tracks import FETCH_TRACKS_TOOL
from .remove_from_library import REMOVE_FROM_LIBRARY_TOOL
from .search import AUDIOBOOK_REFUSAL, SEARCH_TOOL

TOOLS = [
    ADD_TO_LIBRARY_TOOL,
    REMOVE_FROM_LIBRARY_TOOL,
    FETCH_TRACKS_TOOL,
    SEARCH_TOOL,
]

__all__ = [
    "TOOLS",
    "ADD_TO_LIBRARY_TOOL",
    "REMOVE_FROM_LIBRARY_TOOL",
    "FETCH_TRACKS_TOOL",
    "SEARCH_TOOL",
    "AUDIOBOOK_REFUSAL",
]
