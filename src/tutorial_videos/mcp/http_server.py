"""HTTP-based MCP server implementation with SSE support."""

import asyncio
import json
import logging
from typing import Any
from uuid import uuid4

from fastapi import APIRouter, Query, Request, Response
from sse_starlette import EventSourceResponse

from tutorial_videos.exceptions import InvalidArgumentsError, UnknownToolError
from tutorial_videos.tools import VideoToolAdapter

logger = logging.getLogger(__name__)

router = APIRouter(tags=["MCP"])

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "tutorial-video-mcp"
SERVER_VERSION = "1.0.0"

KEEPALIVE_SECONDS = 30.0

# JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Session management for SSE connections
sse_sessions: dict[str, asyncio.Queue] = {}


def get_tool_adapter(request: Request) -> VideoToolAdapter:
    return request.app.state.tool_adapter


def jsonrpc_error(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}}


def jsonrpc_result(request_id: Any, result: dict[str, Any]) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "result": result}


def handle_message(body: Any, adapter: VideoToolAdapter) -> dict[str, Any] | None:
    """Dispatch one JSON-RPC message; notifications return None."""
    if not isinstance(body, dict):
        return jsonrpc_error(None, INVALID_REQUEST, "Invalid request")

    method = body.get("method")
    params = body.get("params") or {}
    request_id = body.get("id")

    if method == "initialize":
        return jsonrpc_result(
            request_id,
            {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": {}},
                "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
            },
        )

    if method == "notifications/initialized":
        logger.info("Client initialized successfully")
        return None

    if method == "ping":
        return jsonrpc_result(request_id, {})

    if method == "tools/list":
        logger.info("ListTools called")
        return jsonrpc_result(request_id, {"tools": adapter.list_tools()})

    if method == "tools/call":
        tool_name = params.get("name")
        logger.info(f"CallTool: {tool_name}")
        try:
            result = adapter.call_tool(tool_name, params.get("arguments"))
        except UnknownToolError as e:
            return jsonrpc_error(request_id, METHOD_NOT_FOUND, str(e))
        except InvalidArgumentsError as e:
            return jsonrpc_error(request_id, INVALID_PARAMS, str(e))
        return jsonrpc_result(request_id, result)

    if request_id is None:
        # Unrecognized notification, nothing to answer
        return None

    return jsonrpc_error(request_id, METHOD_NOT_FOUND, f"Unknown method: {method}")


@router.get("/sse")
async def mcp_sse_endpoint(request: Request):
    """SSE endpoint for MCP communication."""

    session_id = str(uuid4())
    message_queue: asyncio.Queue = asyncio.Queue()
    sse_sessions[session_id] = message_queue
    logger.info(f"[SSE] New connection, session={session_id}")

    async def event_generator():
        """Generate SSE stream for MCP protocol."""
        try:
            # The client POSTs its messages to this endpoint
            yield {"event": "endpoint", "data": f"/messages?session_id={session_id}"}

            while True:
                if await request.is_disconnected():
                    logger.info(f"[SSE] Client disconnected, session={session_id}")
                    break
                try:
                    message = await asyncio.wait_for(message_queue.get(), timeout=KEEPALIVE_SECONDS)
                    yield {"event": "message", "data": json.dumps(message)}
                except TimeoutError:
                    yield {"comment": "keepalive"}

        except asyncio.CancelledError:
            logger.info(f"[SSE] Connection closed, session={session_id}")
            raise
        except Exception as e:
            logger.error(f"[SSE] Stream error, session={session_id}: {e}")
        finally:
            sse_sessions.pop(session_id, None)

    return EventSourceResponse(
        event_generator(),
        headers={"Cache-Control": "no-cache, no-transform", "X-Accel-Buffering": "no"},
    )


@router.post("/messages")
async def mcp_messages_endpoint(request: Request, session_id: str | None = Query(None)):
    """POST endpoint for MCP messages linked to an SSE session."""

    # Without a live session the response is returned directly (streamable HTTP style)
    queue = sse_sessions.get(session_id) if session_id else None
    if session_id and queue is None:
        logger.warning(f"Message for unknown session {session_id}")
        return Response(status_code=404, content="Session not found")

    adapter = get_tool_adapter(request)
    body: Any = None
    try:
        body = await request.json()
        method = body.get("method") if isinstance(body, dict) else None
        logger.info(f"MCP message received: method={method}, session={session_id}")
        response = handle_message(body, adapter)
    except json.JSONDecodeError as e:
        response = jsonrpc_error(None, PARSE_ERROR, f"Parse error: {e}")
    except Exception as e:
        logger.error(f"MCP request error: {e}")
        request_id = body.get("id") if isinstance(body, dict) else None
        response = jsonrpc_error(request_id, INTERNAL_ERROR, f"Internal error: {e!s}")

    if queue is not None:
        if response is not None:
            await queue.put(response)
        return Response(status_code=202)

    if response is None:
        return Response(status_code=202)
    return response
