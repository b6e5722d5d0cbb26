"""Remote MCP server: JSON-RPC over SSE plus the widget assets it links to."""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tutorial_videos.api.errors import register_exception_handlers
from tutorial_videos.api.settings import DEFAULT_API_PORT, configure_logging, get_settings
from tutorial_videos.catalog import get_catalog
from tutorial_videos.tools import VideoToolAdapter
from tutorial_videos.widgets import available_widgets, mount_widgets

from .http_server import SERVER_VERSION
from .http_server import router as mcp_router

logger = logging.getLogger(__name__)

APP_NAME = "Tutorial Video MCP Server"


def log_unhandled_exception(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    """Keep serving other connections when a background task fails."""
    exc = context.get("exception")
    logger.error(f"Unhandled async error: {context.get('message')}", exc_info=exc)


def create_app(base_url: str | None = None, widgets_dir: Path | None = None) -> FastAPI:
    settings = get_settings()
    base_url = (base_url or settings.resolve_base_url(DEFAULT_API_PORT)).rstrip("/")
    directory = Path(widgets_dir or settings.widgets_dir)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        asyncio.get_running_loop().set_exception_handler(log_unhandled_exception)
        logger.info(f"SSE endpoint: {base_url}/sse")
        logger.info(f"Widgets: {base_url}/widgets")
        yield

    app = FastAPI(title=APP_NAME, version=SERVER_VERSION, lifespan=lifespan)
    app.state.tool_adapter = VideoToolAdapter(
        get_catalog(),
        widget_base_url=base_url,
        payload_mode="url",
        list_description_limit=settings.description_limit,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Accept"],
    )
    register_exception_handlers(app)
    app.include_router(mcp_router)

    @app.get("/", tags=["Utility"])
    async def root() -> dict[str, object]:
        return {
            "name": APP_NAME,
            "version": SERVER_VERSION,
            "status": "running",
            "mcp": {
                "endpoint": f"{base_url}/sse",
                "protocol": "Model Context Protocol",
                "transport": "SSE",
            },
            "widgets": {
                "endpoint": f"{base_url}/widgets",
                "available": available_widgets(directory),
            },
        }

    mount_widgets(app, directory)
    return app


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    port = settings.resolve_port(DEFAULT_API_PORT)
    logger.info(f"{APP_NAME} starting on port {port}")
    logger.info(f"Videos: {len(get_catalog())} tutorials available")
    uvicorn.run(create_app(), host=settings.host, port=port)


if __name__ == "__main__":
    main()
