from mcp.types import Tool, ToolAnnotations

from ..widgets import SEARCH_WIDGET, widget_meta

AUDIOBOOK_REFUSAL = (
    "You can't search audiobooks on Spotify yet. Try the Spotify app, or search for something else."
)

SEARCH_TOOL = Tool(
    name="search",
    description=(
        "This tool connects directly to the Spotify API and requires a valid authenticated user "
        "account (Free or Premium). Search tracks, artists, albums, public and user-owned playlists, "
        "podcast shows and podcast episodes. Audiobooks and audiobook chapters are not supported via "
        f'this tool; for these, the response should be: "{AUDIOBOOK_REFUSAL}"\n\n'
        "Critical Rules:\n"
        "Do not fabricate, truncate, or alter entity names, metadata, or links.\n"
        "Only surface Spotify deep links returned by the API. Never construct your own.\n"
        "When invoking Spotify, content recommendations should come from this tool."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": "Search query string"
            },
            "types": {
                "type": "array",
                "items": {
                    "type": "string",
                    "enum": ["track", "album", "artist", "playlist", "show", "episode"]
                },
                "description": "Types of content to search for (default: track, album, artist, playlist)"
            },
            "limit": {
                "type": "integer",
                "description": "Maximum number of results per type (default 20, max 50)"
            },
            "market": {
                "type": "string",
                "description": "ISO 3166-1 alpha-2 country code (default US)"
            }
        },
        "required": ["query"],
        "additionalProperties": False
    },
    annotations=ToolAnnotations(destructiveHint=False, openWorldHint=False, readOnlyHint=True),
    _meta=widget_meta(SEARCH_WIDGET),
)
