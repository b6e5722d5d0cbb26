import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tutorial_videos.bundle import BundleCache

from .errors import register_exception_handlers
from .middleware import LoggingMiddleware
from .settings import DEFAULT_API_PORT, configure_logging, get_settings
from .videos import router as videos_router

logger = logging.getLogger(__name__)

API_NAME = "Tutorial Video API"
API_VERSION = "1.0.0"


def create_app(bundle_path: Path | None = None) -> FastAPI:
    """Build the REST application; the bundle is read once during startup."""
    settings = get_settings()
    bundle = BundleCache(bundle_path or settings.bundle_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await bundle.load()
        yield

    app = FastAPI(title=API_NAME, version=API_VERSION, lifespan=lifespan)
    app.state.bundle = bundle
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.include_router(videos_router)

    @app.get("/", tags=["Utility"])
    async def root() -> dict[str, object]:
        """Describe the service and its endpoints."""
        return {
            "name": API_NAME,
            "version": API_VERSION,
            "description": "API for displaying tutorial videos",
            "endpoints": {
                "videos": "/api/videos",
                "videoById": "/api/videos/:id",
                "embed": "/api/embed/:id",
                "player": "/api/player/:id",
            },
        }

    return app


app = create_app()


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    port = settings.resolve_port(DEFAULT_API_PORT)
    logger.info(f"Tutorial Video API Server starting on port {port}")
    for route in ("/", "/api/videos", "/api/videos/:id", "/api/embed/:id", "/api/player/:id"):
        logger.info(f"  GET {route}")
    uvicorn.run(app, host=settings.host, port=port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
