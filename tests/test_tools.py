import base64
import sys
from pathlib import Path

import pytest
import pytest_asyncio

SRC_DIR = Path(__file__).resolve().parent.parent / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from tutorial_videos.bundle import BundleCache
from tutorial_videos.catalog import get_catalog
from tutorial_videos.exceptions import InvalidArgumentsError, UnknownToolError
from tutorial_videos.models import ShowVideoArguments
from tutorial_videos.tools import LIST_TOOL, SHOW_TOOL, VideoToolAdapter

WIDGET_BASE = "https://widgets.example.com"


@pytest.fixture
def adapter():
    return VideoToolAdapter(get_catalog(), widget_base_url=WIDGET_BASE, payload_mode="url")


@pytest_asyncio.fixture
async def loaded_bundle(tmp_path):
    path = tmp_path / "player.js"
    path.write_text("customElements.define('x', class {});", encoding="utf-8")
    bundle = BundleCache(path)
    await bundle.load()
    return bundle


def test_list_tools_schemas(adapter):
    tools = {tool["name"]: tool for tool in adapter.list_tools()}
    assert set(tools) == {LIST_TOOL, SHOW_TOOL}
    assert tools[SHOW_TOOL]["inputSchema"]["required"] == ["videoId"]
    assert tools[LIST_TOOL]["inputSchema"]["properties"] == {}


def test_list_videos_one_entry_per_record_in_order(adapter):
    text = adapter.list_videos()
    header, body = text.split("\n\n", 1)
    assert header == "Available Tutorial Videos:"
    entries = body.split("\n\n")
    assert len(entries) == len(get_catalog())
    for index, (entry, video) in enumerate(zip(entries, get_catalog()), start=1):
        lines = entry.split("\n")
        assert lines[0] == f"{index}. {video.title}"
        assert lines[1] == f"   Video ID: {video.id}"
        assert lines[2] == f"   {video.description[:100]}..."


def test_list_videos_full_descriptions():
    adapter = VideoToolAdapter(get_catalog(), WIDGET_BASE, list_description_limit=None)
    text = adapter.list_videos()
    for video in get_catalog():
        assert f"   {video.description}" in text
    assert "..." not in text


def test_show_defaults_from_catalog(adapter):
    result = adapter.show_video({"videoId": "Xpg2bnO_-eU"})
    assert result.title == "Introduction to Artificial Intelligence | Part 1"
    assert result.description == get_catalog().find("Xpg2bnO_-eU").description
    assert result.message == "Here's the tutorial video: Introduction to Artificial Intelligence | Part 1"


def test_show_unknown_id_uses_overrides(adapter):
    result = adapter.show_video({"videoId": "unknown-id", "title": "Custom"})
    assert result.title == "Custom"
    assert result.description == ""


def test_show_unknown_id_without_title_falls_back(adapter):
    result = adapter.show_video({"videoId": "unknown-id"})
    assert result.title == "Tutorial Video"


def test_show_overrides_win_over_catalog(adapter):
    result = adapter.show_video(
        {"videoId": "Xpg2bnO_-eU", "title": "Mine", "description": "Desc"}
    )
    assert (result.title, result.description) == ("Mine", "Desc")


@pytest.mark.parametrize("arguments", [{}, None, {"title": "x"}, {"videoId": 42}, {"videoId": "a", "title": 3}])
def test_show_invalid_arguments(adapter, arguments):
    with pytest.raises(InvalidArgumentsError) as exc_info:
        adapter.show_video(arguments)
    assert exc_info.value.detail


def test_show_url_mode_output_template(adapter):
    payload = adapter.call_tool(SHOW_TOOL, {"videoId": "p6Yr-DVao3Y"})
    assert payload["content"] == [
        {"type": "text", "text": "Here's the tutorial video: Prompt Engineering - Introduction"}
    ]
    template = payload["_meta"]["openai"]["outputTemplate"]
    assert template["type"] == "html"
    assert template["url"] == f"{WIDGET_BASE}/widgets/video-player.html"
    assert template["data"]["videoId"] == "p6Yr-DVao3Y"
    assert template["data"]["title"] == "Prompt Engineering - Introduction"


@pytest.mark.asyncio
async def test_show_inline_mode_returns_data_uri(loaded_bundle):
    adapter = VideoToolAdapter(get_catalog(), WIDGET_BASE, payload_mode="inline", bundle=loaded_bundle)
    payload = adapter.call_tool(SHOW_TOOL, {"videoId": "ng5lAQay4qI"})

    assert "_meta" not in payload
    text, resource = payload["content"]
    assert text["text"] == "Here's the tutorial video: Testing Prompts on Google Gemini"
    assert resource["resource"]["mimeType"] == "text/html"
    uri = resource["resource"]["uri"]
    document = base64.b64decode(uri.split(",", 1)[1]).decode("utf-8")
    assert 'video-id="ng5lAQay4qI"' in document
    assert loaded_bundle.script in document


def test_show_inline_mode_without_bundle(tmp_path):
    bundle = BundleCache(tmp_path / "missing.js")
    adapter = VideoToolAdapter(get_catalog(), WIDGET_BASE, payload_mode="inline", bundle=bundle)
    payload = adapter.call_tool(SHOW_TOOL, {"videoId": "ng5lAQay4qI"})
    assert len(payload["content"]) == 1
    assert "Web component not loaded" in payload["content"][0]["text"]


def test_call_list_tool(adapter):
    payload = adapter.call_tool(LIST_TOOL, {})
    assert payload["content"][0]["text"].startswith("Available Tutorial Videos:")


def test_unknown_tool(adapter):
    with pytest.raises(UnknownToolError):
        adapter.call_tool("delete_videos", {})


def test_arguments_use_wire_name_for_video_id():
    params = ShowVideoArguments.model_validate({"videoId": "Xpg2bnO_-eU", "extra": 1})
    assert params.video_id == "Xpg2bnO_-eU"
    assert params.model_dump(by_alias=True) == {
        "videoId": "Xpg2bnO_-eU",
        "title": None,
        "description": None,
    }


def test_missing_video_id_is_reported_by_wire_name(adapter):
    with pytest.raises(InvalidArgumentsError, match="videoId"):
        adapter.show_video({"title": "x"})
