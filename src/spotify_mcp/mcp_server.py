import asyncio
import logging
from typing import List, Optional

import click
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from . import __version__
from .dispatcher import ToolDispatcher, create_dispatcher
from .utils.config import get_server_config
from .widgets import WIDGET_MIME_TYPE, WIDGETS_BY_ID, WIDGETS_BY_URI, widget_meta

logger = logging.getLogger(__name__)

SERVER_NAME = "spotify-mcp"


def list_widget_resources() -> List[types.Resource]:
    return [
        types.Resource(
            uri=widget.template_uri,
            name=widget.title,
            description=f"{widget.title} widget markup",
            mimeType=WIDGET_MIME_TYPE,
            _meta=widget_meta(widget),
        )
        for widget in WIDGETS_BY_ID.values()
    ]


def list_widget_resource_templates() -> List[types.ResourceTemplate]:
    return [
        types.ResourceTemplate(
            uriTemplate=widget.template_uri,
            name=widget.title,
            description=f"{widget.title} widget markup",
            mimeType=WIDGET_MIME_TYPE,
            _meta=widget_meta(widget),
        )
        for widget in WIDGETS_BY_ID.values()
    ]


def read_widget_resource(uri: str) -> Optional[types.ReadResourceResult]:
    """Return the widget template registered under ``uri``, or None if there is none."""
    widget = WIDGETS_BY_URI.get(str(uri))
    if widget is None:
        return None
    return types.ReadResourceResult(
        contents=[
            types.TextResourceContents(
                uri=widget.template_uri,
                mimeType=WIDGET_MIME_TYPE,
                text=widget.html,
                _meta=widget_meta(widget),
            )
        ]
    )


def create_server(session_id: str, dispatcher: ToolDispatcher) -> Server:
    """Build an MCP server whose tool calls run on behalf of ``session_id``."""
    server = Server(SERVER_NAME, version=__version__)

    # lists the tools available
    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return dispatcher.list_tools()

    @server.list_resources()
    async def list_resources() -> list[types.Resource]:
        return list_widget_resources()

    @server.list_resource_templates()
    async def list_resource_templates() -> list[types.ResourceTemplate]:
        return list_widget_resource_templates()

    # Registered directly so results keep their _meta (widget template, invocation strings)
    async def handle_read_resource(request: types.ReadResourceRequest) -> types.ServerResult:
        result = read_widget_resource(str(request.params.uri))
        if result is None:
            raise McpError(types.ErrorData(
                code=types.INVALID_PARAMS,
                message=f"Unknown resource: {request.params.uri}",
            ))
        return types.ServerResult(result)

    async def handle_call_tool(request: types.CallToolRequest) -> types.ServerResult:
        result = await asyncio.to_thread(
            dispatcher.call_tool,
            session_id,
            request.params.name,
            request.params.arguments or {},
        )
        return types.ServerResult(result)

    server.request_handlers[types.ReadResourceRequest] = handle_read_resource
    server.request_handlers[types.CallToolRequest] = handle_call_tool
    return server


async def run_stdio(dispatcher: ToolDispatcher, session_id: str) -> None:
    """Serve MCP over stdio for a single local session."""
    server = create_server(session_id, dispatcher)
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options()
        )


@click.command()
@click.option("--host", default=None, help="Interface to bind for HTTP (default: $HOST or 0.0.0.0)")
@click.option("--port", default=None, type=int, help="Port to listen on for HTTP (default: $PORT or 8000)")
@click.option("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
@click.option("--stdio", is_flag=True, help="Run MCP server over stdio instead of HTTP")
def main(host: Optional[str], port: Optional[int], log_level: str, stdio: bool):
    """Spotify MCP server with OAuth sign-in and a search results widget."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    config = get_server_config()
    dispatcher = create_dispatcher()

    if stdio:
        logger.info("Starting Spotify MCP server (stdio mode, session %s)", config["session_id"])
        asyncio.run(run_stdio(dispatcher, config["session_id"]))
        return

    import uvicorn
    from .http_app import create_app

    host = host or config["host"]
    port = port or config["port"]
    logger.info("Spotify MCP server listening on http://%s:%s", host, port)
    logger.info("  SSE stream: GET /mcp, messages: POST /mcp/messages/?session_id=...")
    logger.info("  Stateless calls: POST /rpc")
    logger.info("  OAuth callback: GET /auth/callback (redirect URI %s)",
                dispatcher.authorization.oauth_handler.redirect_uri)
    uvicorn.run(create_app(dispatcher), host=host, port=port, log_level=log_level.lower())


if __name__ == "__main__":
    main()
