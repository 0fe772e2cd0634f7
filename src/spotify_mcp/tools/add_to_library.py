from mcp.types import Tool, ToolAnnotations

ADD_TO_LIBRARY_TOOL = Tool(
    name="add_to_library",
    description=(
        "Adds supported Spotify content to the authenticated user's library. Supported types: tracks, "
        "albums, artists (follow), playlists (follow), podcast shows, podcast episodes. Audiobooks and "
        "audiobook chapters are not supported. Do NOT call from free-form chat. This tool is only for "
        "widget actions (e.g., user clicks Save/+ on a result in the Spotify widget). Only invoke for "
        "items that were returned by the Spotify Search tool."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "itemType": {
                "type": "string",
                "enum": ["track", "album", "artist", "playlist", "show", "episode"],
                "description": "Type of content to add"
            },
            "itemId": {
                "type": "string",
                "description": "Spotify ID of the item to add"
            }
        },
        "required": ["itemType", "itemId"],
        "additionalProperties": False
    },
    annotations=ToolAnnotations(destructiveHint=False, openWorldHint=False, readOnlyHint=False),
    _meta={
        "openai/widgetAccessible": True,
        "openai/toolInvocation/invoking": "Adding to your Spotify library",
        "openai/toolInvocation/invoked": "Added to your Spotify library",
    },
)
