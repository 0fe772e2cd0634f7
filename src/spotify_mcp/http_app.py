"""HTTP surface: SSE and stateless MCP transports, the OAuth callback, and widget previews."""

import asyncio
import logging
import secrets

import mcp.types as types
from mcp.server.sse import SseServerTransport
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response
from starlette.routing import Mount, Route

from .dispatcher import ToolDispatcher
from .mcp_server import (
    create_server,
    list_widget_resource_templates,
    list_widget_resources,
    read_widget_resource,
)
from .utils.config import DEFAULT_SESSION_ID
from .widgets import PREVIEW_PROPS, WIDGETS_BY_ID, render_widget_document

logger = logging.getLogger(__name__)

SSE_PATH = "/mcp"
MESSAGES_PATH = "/mcp/messages/"
RPC_PATH = "/rpc"
AUTH_CALLBACK_PATH = "/auth/callback"


def _dump(result) -> dict:
    return result.model_dump(mode="json", by_alias=True, exclude_none=True)


async def dispatch_rpc(dispatcher: ToolDispatcher, body: dict) -> JSONResponse:
    """Answer one stateless MCP call ``{"method", "params", "userId"}``."""
    method = body.get("method")
    params = body.get("params") or {}
    session_id = body.get("userId") or DEFAULT_SESSION_ID

    if method == "tools/list":
        return JSONResponse(_dump(types.ListToolsResult(tools=dispatcher.list_tools())))

    if method == "resources/list":
        return JSONResponse(_dump(types.ListResourcesResult(resources=list_widget_resources())))

    if method == "resources/templates/list":
        return JSONResponse(_dump(types.ListResourceTemplatesResult(
            resourceTemplates=list_widget_resource_templates()
        )))

    if method == "resources/read":
        result = read_widget_resource(params.get("uri") or "")
        if result is None:
            return JSONResponse({"error": "Resource not found"}, status_code=404)
        return JSONResponse(_dump(result))

    if method == "tools/call":
        result = await asyncio.to_thread(
            dispatcher.call_tool,
            session_id,
            params.get("name"),
            params.get("arguments") or {},
        )
        return JSONResponse(_dump(result))

    return JSONResponse({"error": "Unknown method"}, status_code=400)


def create_app(dispatcher: ToolDispatcher) -> Starlette:
    sse = SseServerTransport(MESSAGES_PATH)

    async def handle_sse(request: Request) -> Response:
        # Every stream is its own Spotify session until the user signs in
        session_id = secrets.token_hex(16)
        server = create_server(session_id, dispatcher)
        logger.info("SSE session %s opened", session_id)
        async with sse.connect_sse(request.scope, request.receive, request._send) as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())
        logger.info("SSE session %s closed", session_id)
        return Response()

    async def handle_rpc(request: Request) -> Response:
        try:
            body = await request.json()
        except ValueError:
            return JSONResponse({"error": "Invalid JSON body"}, status_code=400)
        if not isinstance(body, dict):
            return JSONResponse({"error": "Request body must be a JSON object"}, status_code=400)

        try:
            return await dispatch_rpc(dispatcher, body)
        except Exception as e:
            logger.exception("Error handling RPC request")
            return JSONResponse({"error": str(e)}, status_code=500)

    async def handle_auth_callback(request: Request) -> Response:
        query = request.query_params
        page = await asyncio.to_thread(
            dispatcher.authorization.handle_callback,
            query.get("code"),
            query.get("state"),
            query.get("error"),
        )
        return HTMLResponse(page.html, status_code=page.status_code)

    async def handle_widget_preview(request: Request) -> Response:
        widget = WIDGETS_BY_ID.get(request.path_params["widget_id"])
        if widget is None:
            return PlainTextResponse("Not Found", status_code=404)
        return HTMLResponse(render_widget_document(PREVIEW_PROPS, widget))

    async def handle_health(request: Request) -> Response:
        return JSONResponse({"status": "ok"})

    return Starlette(
        routes=[
            Route("/health", handle_health),
            Route(SSE_PATH, handle_sse, methods=["GET"]),
            Mount(MESSAGES_PATH, app=sse.handle_post_message),
            Route(RPC_PATH, handle_rpc, methods=["POST"]),
            Route(AUTH_CALLBACK_PATH, handle_auth_callback, methods=["GET"]),
            Route("/widgets/{widget_id}/preview", handle_widget_preview, methods=["GET"]),
        ],
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=["*"],
                allow_methods=["GET", "POST", "OPTIONS"],
                allow_headers=["content-type", "authorization"],
            )
        ],
    )
