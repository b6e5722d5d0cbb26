import logging
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from tutorial_videos.api.errors import register_exception_handlers
from tutorial_videos.api.middleware import LoggingMiddleware
from tutorial_videos.api.settings import DEFAULT_WIDGET_PORT, configure_logging, get_settings

from .static import available_widgets, describe_widgets, mount_widgets

logger = logging.getLogger(__name__)

HOST_NAME = "Tutorial Video Widget Server"
HOST_VERSION = "1.0.0"


def create_app(widgets_dir: Path | None = None) -> FastAPI:
    """Build the widget host serving built widget pages to MCP clients."""
    directory = Path(widgets_dir or get_settings().widgets_dir)

    app = FastAPI(title=HOST_NAME, version=HOST_VERSION)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    register_exception_handlers(app)

    @app.get("/", tags=["Utility"])
    async def root(request: Request) -> dict[str, object]:
        base_url = str(request.base_url).rstrip("/")
        return {
            "name": HOST_NAME,
            "version": HOST_VERSION,
            "status": "running",
            "widgetUrl": f"{base_url}/widgets",
            "availableWidgets": available_widgets(directory),
        }

    @app.get("/widgets", tags=["Widgets"])
    async def list_widgets(request: Request) -> dict[str, object]:
        return {"widgets": describe_widgets(directory, str(request.base_url))}

    mount_widgets(app, directory)
    return app


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    port = settings.resolve_port(DEFAULT_WIDGET_PORT)
    directory = Path(settings.widgets_dir)
    logger.info(f"Widget server starting on port {port}")
    logger.info(f"  Widgets: http://localhost:{port}/widgets")
    widgets = available_widgets(directory)
    if not widgets:
        logger.warning(f"No widgets found in {directory}. Run: tutorial-videos-build widgets")
    for name in widgets:
        logger.info(f"  - {name}")
    uvicorn.run(create_app(directory), host=settings.host, port=port)


if __name__ == "__main__":
    main()
