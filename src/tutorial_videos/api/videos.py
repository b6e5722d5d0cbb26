import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, JSONResponse

from tutorial_videos.bundle import BundleCache
from tutorial_videos.catalog import VideoCatalog, get_catalog
from tutorial_videos.rendering import (
    render_bundle_missing_page,
    render_embed,
    render_not_found_page,
    render_player_page,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Videos"])


def get_bundle(request: Request) -> BundleCache:
    return request.app.state.bundle


@router.get("/videos")
async def list_videos(catalog: VideoCatalog = Depends(get_catalog)) -> dict[str, Any]:
    """Return the full catalog."""
    return {
        "success": True,
        "count": len(catalog),
        "videos": [video.model_dump() for video in catalog],
    }


@router.get("/videos/{video_id}")
async def get_video(video_id: str, catalog: VideoCatalog = Depends(get_catalog)) -> dict[str, Any]:
    """Return a single video; unknown ids answer 404 with the known ids."""
    video = catalog.get(video_id)
    return {"success": True, "video": video.model_dump()}


@router.get("/embed/{video_id}")
async def get_embed(video_id: str, catalog: VideoCatalog = Depends(get_catalog)):
    """Return the iframe embed code for a catalog video."""
    video = catalog.find(video_id)
    if video is None:
        logger.info("Embed requested for unknown video %s", video_id)
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"success": False, "error": "Video not found"},
        )

    snippet = render_embed(video.id)
    return {
        "success": True,
        "video": video.model_dump(),
        **snippet.model_dump(by_alias=True),
    }


@router.get("/player/{video_id}", response_class=HTMLResponse)
async def get_player(
    video_id: str,
    catalog: VideoCatalog = Depends(get_catalog),
    bundle: BundleCache = Depends(get_bundle),
) -> HTMLResponse:
    """Return a full HTML page hosting the tutorial video player element."""
    video = catalog.find(video_id)
    if video is None:
        return HTMLResponse(render_not_found_page(video_id), status_code=status.HTTP_404_NOT_FOUND)

    if not bundle.available:
        logger.error(f"Player page for {video_id} requested but the web component is not loaded")
        return HTMLResponse(
            render_bundle_missing_page(), status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )

    return HTMLResponse(render_player_page(video, bundle.script))
