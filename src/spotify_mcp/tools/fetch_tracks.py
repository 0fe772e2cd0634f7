from mcp.types import Tool, ToolAnnotations

FETCH_TRACKS_TOOL = Tool(
    name="fetch_tracks",
    description=(
        "Fetches a page of tracks for a playlist with their saved status, explicit flags, and deep "
        "links. Requires a playlist owned by or shared with the authenticated user. This tool should "
        "only be called within the Spotify Widget and must not be triggered directly by the user."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "playlistId": {
                "type": "string",
                "description": "Spotify playlist ID"
            },
            "offset": {
                "type": "integer",
                "minimum": 0,
                "description": "The index of the first item to return (default 0)"
            },
            "limit": {
                "type": "integer",
                "description": "Maximum number of items to return (default 100, max 100)"
            }
        },
        "required": ["playlistId"],
        "additionalProperties": False
    },
    annotations=ToolAnnotations(destructiveHint=False, openWorldHint=False, readOnlyHint=True),
    _meta={
        "openai/widgetAccessible": True,
        "openai/toolInvocation/invoking": "Loading playlist tracks",
        "openai/toolInvocation/invoked": "Loaded playlist tracks",
    },
)
