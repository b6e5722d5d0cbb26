"""Exception handlers shared by the HTTP front ends."""

import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from tutorial_videos.api.settings import get_settings
from tutorial_videos.exceptions import VideoNotFoundError

logger = logging.getLogger(__name__)


def error_payload(exc: Exception) -> dict[str, object]:
    """Body for a 500 response; the traceback is only exposed in development."""
    payload: dict[str, object] = {
        "success": False,
        "error": "Internal server error",
        "message": str(exc),
    }
    if get_settings().is_development:
        payload["details"] = "".join(traceback.format_exception(exc))
    return payload


async def video_not_found_handler(request: Request, exc: VideoNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"success": False, "error": "Video not found", "availableIds": exc.available_ids},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=error_payload(exc)
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(VideoNotFoundError, video_not_found_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
