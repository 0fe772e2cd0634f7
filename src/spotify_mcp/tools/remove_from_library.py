from mcp.types import Tool, ToolAnnotations

REMOVE_FROM_LIBRARY_TOOL = Tool(
    name="remove_from_library",
    description=(
        "Removes supported Spotify content from the authenticated user's library. Supported types: "
        "tracks, albums, artists (unfollow), playlists (unfollow), podcast shows, podcast episodes. "
        "Audiobooks and audiobook chapters are not supported. Do NOT call from free-form chat. This tool "
        "is only for widget actions (e.g., user clicks Remove/- on a result in the Spotify widget)."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "itemType": {
                "type": "string",
                "enum": ["track", "album", "artist", "playlist", "show", "episode"],
                "description": "Type of content to remove"
            },
            "itemId": {
                "type": "string",
                "description": "Spotify ID of the item to remove"
            }
        },
        "required": ["itemType", "itemId"],
        "additionalProperties": False
    },
    annotations=ToolAnnotations(destructiveHint=True, openWorldHint=False, readOnlyHint=False),
    _meta={
        "openai/widgetAccessible": True,
        "openai/toolInvocation/invoking": "Removing from your Spotify library",
        "openai/toolInvocation/invoked": "Removed from your Spotify library",
    },
)
