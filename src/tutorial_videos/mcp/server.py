"""Main MCP server implementation over stdio."""

import logging
from typing import Annotated, Any

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools.tool import ToolResult
from mcp.types import EmbeddedResource, TextContent, TextResourceContents
from pydantic import Field

from tutorial_videos.api.settings import get_settings
from tutorial_videos.bundle import BundleCache
from tutorial_videos.catalog import get_catalog
from tutorial_videos.exceptions import InvalidArgumentsError
from tutorial_videos.tools import LIST_TOOL, SHOW_TOOL, VideoToolAdapter, to_content, to_meta

logger = logging.getLogger(__name__)

SERVER_NAME = "tutorial-video-mcp"


def to_mcp_content(items: list[dict[str, Any]]) -> list[TextContent | EmbeddedResource]:
    content: list[TextContent | EmbeddedResource] = []
    for item in items:
        if item["type"] == "resource":
            content.append(
                EmbeddedResource(
                    type="resource", resource=TextResourceContents(**item["resource"])
                )
            )
        else:
            content.append(TextContent(type="text", text=item["text"]))
    return content


def create_adapter(bundle: BundleCache) -> VideoToolAdapter:
    settings = get_settings()
    return VideoToolAdapter(
        get_catalog(),
        widget_base_url=settings.widget_url,
        payload_mode=settings.mcp_payload_mode,
        list_description_limit=settings.description_limit,
        bundle=bundle,
    )


def create_mcp_server(adapter: VideoToolAdapter) -> FastMCP:
    """Create and configure the FastMCP server."""

    mcp = FastMCP(
        name=SERVER_NAME,
        instructions="Show tutorial videos about AI and Prompt Engineering inline in the chat",
    )

    @mcp.tool(name=LIST_TOOL, description="List all available tutorial videos from the playlist")
    def list_tutorial_videos() -> str:
        return adapter.list_videos()

    @mcp.tool(
        name=SHOW_TOOL,
        description=(
            "Display a YouTube tutorial video inline in the chat with a custom widget. "
            "Provide a video ID from the tutorial playlist."
        ),
    )
    def show_tutorial_video(
        videoId: Annotated[str, Field(description='YouTube video ID (e.g., "Xpg2bnO_-eU")')],
        title: Annotated[str | None, Field(description="Optional title for the video")] = None,
        description: Annotated[
            str | None, Field(description="Optional description for the video")
        ] = None,
    ) -> ToolResult:
        try:
            result = adapter.show_video(
                {"videoId": videoId, "title": title, "description": description}
            )
        except InvalidArgumentsError as e:
            raise ToolError(str(e)) from e

        return ToolResult(content=to_mcp_content(to_content(result)), meta=to_meta(result))

    return mcp


async def start_mcp_server(bundle_path=None) -> None:
    """Load the web component, then serve MCP over stdio until the client exits."""
    settings = get_settings()
    bundle = BundleCache(bundle_path or settings.bundle_path)
    await bundle.load()

    adapter = create_adapter(bundle)
    mcp = create_mcp_server(adapter)

    logger.info("Starting Tutorial Video MCP Server...")
    logger.info(f"Widget URL: {adapter.widget_url}")
    logger.info(f"Payload mode: {adapter.payload_mode}")
    logger.info(f"Videos: {len(adapter.catalog)} tutorials available")
    logger.info(f"Available tools: {SHOW_TOOL}, {LIST_TOOL}")

    await mcp.run_async(transport="stdio")
