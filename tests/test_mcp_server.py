import base64
import sys
from pathlib import Path

import pytest
import pytest_asyncio
from fastmcp import Client
from fastmcp.exceptions import ToolError
from mcp.shared.exceptions import McpError

SRC_DIR = Path(__file__).resolve().parent.parent / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from tutorial_videos.bundle import BundleCache
from tutorial_videos.catalog import get_catalog
from tutorial_videos.mcp.server import create_mcp_server
from tutorial_videos.tools import VideoToolAdapter

SCRIPT = "customElements.define('tutorial-video-player', class extends HTMLElement {});"


@pytest_asyncio.fixture
async def bundle(tmp_path):
    path = tmp_path / "tutorial-video-player.js"
    path.write_text(SCRIPT, encoding="utf-8")
    cache = BundleCache(path)
    await cache.load()
    return cache


def make_server(mode, bundle=None):
    adapter = VideoToolAdapter(
        get_catalog(), "http://localhost:3001", payload_mode=mode, bundle=bundle
    )
    return create_mcp_server(adapter)


@pytest.mark.asyncio
async def test_lists_both_tools():
    async with Client(make_server("url")) as client:
        tools = await client.list_tools()
    assert {tool.name for tool in tools} == {"list_tutorial_videos", "show_tutorial_video"}


@pytest.mark.asyncio
async def test_list_tutorial_videos():
    async with Client(make_server("url")) as client:
        result = await client.call_tool("list_tutorial_videos", {})
    text = result.content[0].text
    assert text.startswith("Available Tutorial Videos:")
    assert "1. Introduction to Artificial Intelligence | Part 1" in text
    assert "4. Testing Prompts on Google Gemini" in text


@pytest.mark.asyncio
async def test_show_video_url_mode():
    async with Client(make_server("url")) as client:
        result = await client.call_tool("show_tutorial_video", {"videoId": "Xpg2bnO_-eU"})
    assert len(result.content) == 1
    assert result.content[0].text == (
        "Here's the tutorial video: Introduction to Artificial Intelligence | Part 1"
    )


@pytest.mark.asyncio
async def test_show_video_url_mode_sends_output_template():
    async with Client(make_server("url")) as client:
        result = await client.call_tool_mcp("show_tutorial_video", {"videoId": "Xpg2bnO_-eU"})
    assert not result.isError
    template = result.meta["openai"]["outputTemplate"]
    assert template["type"] == "html"
    assert template["url"] == "http://localhost:3001/widgets/video-player.html"
    assert template["data"] == {
        "videoId": "Xpg2bnO_-eU",
        "title": "Introduction to Artificial Intelligence | Part 1",
        "description": get_catalog().get("Xpg2bnO_-eU").description,
    }


@pytest.mark.asyncio
async def test_show_video_inline_mode(bundle):
    async with Client(make_server("inline", bundle)) as client:
        result = await client.call_tool(
            "show_tutorial_video", {"videoId": "unknown-id", "title": "Custom"}
        )
    text, resource = result.content
    assert text.text == "Here's the tutorial video: Custom"
    assert resource.resource.mimeType == "text/html"
    encoded = str(resource.resource.uri).split(",", 1)[1]
    document = base64.b64decode(encoded).decode("utf-8")
    assert 'title="Custom"' in document
    assert SCRIPT in document


@pytest.mark.asyncio
async def test_show_video_requires_video_id():
    async with Client(make_server("url")) as client:
        with pytest.raises(ToolError):
            await client.call_tool("show_tutorial_video", {})


@pytest.mark.asyncio
async def test_unknown_tool():
    async with Client(make_server("url")) as client:
        with pytest.raises((ToolError, McpError)):
            await client.call_tool("delete_everything", {})
