"""MCP tool adapter over the video catalog.

Both MCP transports (stdio via FastMCP and the SSE JSON-RPC router) call into
``VideoToolAdapter`` so the tools behave identically whatever carries them.
"""

import logging
from typing import Any, Literal

from pydantic import ValidationError

from tutorial_videos.bundle import BundleCache
from tutorial_videos.catalog import VideoCatalog
from tutorial_videos.exceptions import InvalidArgumentsError, UnknownToolError
from tutorial_videos.models import ShowVideoArguments, ShowVideoResult
from tutorial_videos.rendering import DEFAULT_TITLE, html_data_uri, render_inline_player

logger = logging.getLogger(__name__)

LIST_TOOL = "list_tutorial_videos"
SHOW_TOOL = "show_tutorial_video"

WIDGET_PAGE = "video-player.html"

PayloadMode = Literal["inline", "url"]


def format_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item["loc"]) or "arguments"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


class VideoToolAdapter:
    """Exposes list and show operations for MCP clients."""

    def __init__(
        self,
        catalog: VideoCatalog,
        widget_base_url: str,
        payload_mode: PayloadMode = "url",
        list_description_limit: int | None = 100,
        bundle: BundleCache | None = None,
    ):
        self.catalog = catalog
        self.widget_base_url = widget_base_url.rstrip("/")
        self.payload_mode = payload_mode
        self.list_description_limit = list_description_limit
        self.bundle = bundle

    @property
    def widget_url(self) -> str:
        return f"{self.widget_base_url}/widgets/{WIDGET_PAGE}"

    def list_tools(self) -> list[dict[str, Any]]:
        return [
            {
                "name": SHOW_TOOL,
                "description": (
                    "Display a YouTube tutorial video inline with a custom widget. "
                    "Videos cover AI and Prompt Engineering topics. Provide a video ID "
                    "from the tutorial playlist."
                ),
                "inputSchema": {
                    "type": "object",
                    "properties": {
                        "videoId": {
                            "type": "string",
                            "description": 'YouTube video ID (e.g., "Xpg2bnO_-eU")',
                        },
                        "title": {
                            "type": "string",
                            "description": "Optional title for the video",
                        },
                        "description": {
                            "type": "string",
                            "description": "Optional description for the video",
                        },
                    },
                    "required": ["videoId"],
                },
            },
            {
                "name": LIST_TOOL,
                "description": "List all available tutorial videos from the playlist",
                "inputSchema": {"type": "object", "properties": {}},
            },
        ]

    def list_videos(self) -> str:
        """Summarize the catalog, one numbered entry per video."""
        entries = []
        for index, video in enumerate(self.catalog, start=1):
            description = video.description
            if self.list_description_limit is not None:
                description = f"{description[: self.list_description_limit]}..."
            entries.append(f"{index}. {video.title}\n   Video ID: {video.id}\n   {description}")
        return "Available Tutorial Videos:\n\n" + "\n\n".join(entries)

    def show_video(self, arguments: dict[str, Any] | None) -> ShowVideoResult:
        try:
            params = ShowVideoArguments.model_validate(arguments or {})
        except ValidationError as e:
            raise InvalidArgumentsError(format_validation_error(e)) from e

        # Unknown ids still render; the catalog only supplies defaults.
        video = self.catalog.find(params.video_id)
        title = params.title or (video.title if video else None) or DEFAULT_TITLE
        description = params.description or (video.description if video else None) or ""

        result = ShowVideoResult(
            video_id=params.video_id,
            title=title,
            description=description,
            message=f"Here's the tutorial video: {title}",
        )

        if self.payload_mode == "url":
            result.output_template = {
                "type": "html",
                "url": self.widget_url,
                "data": {
                    "videoId": params.video_id,
                    "title": title,
                    "description": description,
                },
            }
        elif self.bundle is not None and self.bundle.available:
            result.html = render_inline_player(
                params.video_id, title, description, self.bundle.script
            )
        else:
            logger.warning("show_tutorial_video called before the web component was loaded")
            result.message = (
                "Error: Web component not loaded. Please run 'tutorial-videos-build web' first."
            )

        logger.info(f"Resolved {SHOW_TOOL}: video={params.video_id}, mode={self.payload_mode}")
        return result

    def call_tool(self, name: str | None, arguments: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run a tool and return an MCP CallToolResult-shaped dict."""
        if name == LIST_TOOL:
            return {"content": [{"type": "text", "text": self.list_videos()}]}
        if name == SHOW_TOOL:
            return to_call_tool_result(self.show_video(arguments))
        raise UnknownToolError(name)


def to_content(result: ShowVideoResult) -> list[dict[str, Any]]:
    content: list[dict[str, Any]] = [{"type": "text", "text": result.message}]
    if result.html is not None:
        content.append(
            {
                "type": "resource",
                "resource": {
                    "uri": html_data_uri(result.html),
                    "mimeType": "text/html",
                    "text": result.html,
                },
            }
        )
    return content


def to_meta(result: ShowVideoResult) -> dict[str, Any] | None:
    if result.output_template is None:
        return None
    return {"openai": {"outputTemplate": result.output_template}}


def to_call_tool_result(result: ShowVideoResult) -> dict[str, Any]:
    payload: dict[str, Any] = {"content": to_content(result)}
    meta = to_meta(result)
    if meta is not None:
        payload["_meta"] = meta
    return payload
