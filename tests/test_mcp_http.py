import asyncio
import json
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

SRC_DIR = Path(__file__).resolve().parent.parent / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from tutorial_videos.catalog import get_catalog
from tutorial_videos.mcp import http_server
from tutorial_videos.mcp.app import create_app
from tutorial_videos.mcp.http_server import handle_message, mcp_sse_endpoint
from tutorial_videos.tools import VideoToolAdapter

BASE_URL = "https://mcp.example.com"


@pytest.fixture
def adapter():
    return VideoToolAdapter(get_catalog(), widget_base_url=BASE_URL, payload_mode="url")


@pytest.fixture
def client(tmp_path):
    widgets = tmp_path / "widgets"
    widgets.mkdir()
    (widgets / "video-player.html").write_text("<html></html>", encoding="utf-8")
    with TestClient(create_app(base_url=BASE_URL, widgets_dir=widgets)) as c:
        yield c


def rpc(method, params=None, request_id=1):
    message = {"jsonrpc": "2.0", "id": request_id, "method": method}
    if params is not None:
        message["params"] = params
    return message


# --- JSON-RPC dispatch ---
def test_initialize(adapter):
    response = handle_message(rpc("initialize", {"protocolVersion": "2024-11-05"}), adapter)
    assert response["id"] == 1
    assert response["result"]["serverInfo"]["name"] == "tutorial-video-mcp"
    assert "tools" in response["result"]["capabilities"]


def test_initialized_notification_has_no_response(adapter):
    message = {"jsonrpc": "2.0", "method": "notifications/initialized"}
    assert handle_message(message, adapter) is None


def test_tools_list(adapter):
    response = handle_message(rpc("tools/list"), adapter)
    names = [tool["name"] for tool in response["result"]["tools"]]
    assert names == ["show_tutorial_video", "list_tutorial_videos"]


def test_tools_call_show(adapter):
    response = handle_message(
        rpc("tools/call", {"name": "show_tutorial_video", "arguments": {"videoId": "Xpg2bnO_-eU"}}),
        adapter,
    )
    result = response["result"]
    assert result["content"][0]["text"].endswith("Introduction to Artificial Intelligence | Part 1")
    template = result["_meta"]["openai"]["outputTemplate"]
    assert template["url"] == f"{BASE_URL}/widgets/video-player.html"


def test_tools_call_invalid_arguments(adapter):
    response = handle_message(
        rpc("tools/call", {"name": "show_tutorial_video", "arguments": {}}), adapter
    )
    assert response["error"]["code"] == http_server.INVALID_PARAMS
    assert "videoId" in response["error"]["message"]


def test_tools_call_unknown_tool(adapter):
    response = handle_message(rpc("tools/call", {"name": "nope", "arguments": {}}), adapter)
    assert response["error"]["code"] == http_server.METHOD_NOT_FOUND
    assert response["error"]["message"] == "Unknown tool: nope"


def test_unknown_method(adapter):
    response = handle_message(rpc("resources/list"), adapter)
    assert response["error"]["code"] == http_server.METHOD_NOT_FOUND


def test_non_object_message(adapter):
    response = handle_message(["not", "a", "request"], adapter)
    assert response["error"]["code"] == http_server.INVALID_REQUEST


# --- HTTP endpoints ---
def test_root_descriptor(client):
    data = client.get("/").json()
    assert data["mcp"] == {
        "endpoint": f"{BASE_URL}/sse",
        "protocol": "Model Context Protocol",
        "transport": "SSE",
    }
    assert data["widgets"] == {
        "endpoint": f"{BASE_URL}/widgets",
        "available": ["video-player.html"],
    }


def test_messages_without_session_respond_directly(client):
    resp = client.post("/messages", json=rpc("tools/call", {"name": "list_tutorial_videos"}))
    assert resp.status_code == 200
    text = resp.json()["result"]["content"][0]["text"]
    assert text.count("Video ID:") == 4


def test_messages_parse_error(client):
    resp = client.post(
        "/messages", content=b"{not json", headers={"content-type": "application/json"}
    )
    assert resp.json()["error"]["code"] == http_server.PARSE_ERROR


def test_messages_for_unknown_session(client):
    resp = client.post("/messages?session_id=missing", json=rpc("tools/list"))
    assert resp.status_code == 404


def test_messages_are_queued_for_session(client):
    queue: asyncio.Queue = asyncio.Queue()
    http_server.sse_sessions["test-session"] = queue
    try:
        resp = client.post("/messages?session_id=test-session", json=rpc("tools/list", request_id=7))
        assert resp.status_code == 202
        queued = queue.get_nowait()
        assert queued["id"] == 7
        assert len(queued["result"]["tools"]) == 2

        notification = {"jsonrpc": "2.0", "method": "notifications/initialized"}
        resp = client.post("/messages?session_id=test-session", json=notification)
        assert resp.status_code == 202
        assert queue.empty()
    finally:
        http_server.sse_sessions.pop("test-session", None)


def test_widgets_served_with_cors(client):
    resp = client.get("/widgets/video-player.html")
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "*"


class StreamRequest:
    """Minimal stand-in for the request driving an SSE stream."""

    def __init__(self):
        self.disconnected = False

    async def is_disconnected(self):
        return self.disconnected


def session_from_endpoint_event(event):
    assert event["event"] == "endpoint"
    path, _, session_id = event["data"].partition("?session_id=")
    assert path == "/messages"
    return session_id


@pytest.mark.asyncio
async def test_sse_stream_announces_endpoint_and_relays_messages():
    request = StreamRequest()
    response = await mcp_sse_endpoint(request)
    events = response.body_iterator

    session_id = session_from_endpoint_event(await anext(events))
    assert session_id in http_server.sse_sessions

    reply = {"jsonrpc": "2.0", "id": 7, "result": {}}
    await http_server.sse_sessions[session_id].put(reply)
    message = await anext(events)
    assert message["event"] == "message"
    assert json.loads(message["data"]) == reply

    request.disconnected = True
    with pytest.raises(StopAsyncIteration):
        await anext(events)
    assert session_id not in http_server.sse_sessions


@pytest.mark.asyncio
async def test_sse_session_removed_when_stream_closed():
    response = await mcp_sse_endpoint(StreamRequest())
    events = response.body_iterator

    session_id = session_from_endpoint_event(await anext(events))
    assert session_id in http_server.sse_sessions

    await events.aclose()
    assert session_id not in http_server.sse_sessions


@pytest.mark.asyncio
async def test_sse_session_removed_when_stream_cancelled():
    response = await mcp_sse_endpoint(StreamRequest())
    events = response.body_iterator
    session_id = session_from_endpoint_event(await anext(events))

    # Blocks on the empty session queue until cancelled
    pending = asyncio.ensure_future(anext(events))
    await asyncio.sleep(0.05)
    pending.cancel()
    with pytest.raises(asyncio.CancelledError):
        await pending
    assert session_id not in http_server.sse_sessions
