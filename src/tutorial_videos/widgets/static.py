"""Static serving of built widget assets."""

import os
from pathlib import Path
from typing import Any

from fastapi import FastAPI
from starlette.responses import Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

WIDGET_DESCRIPTIONS = {
    "video-player": "YouTube video player widget",
}


class WidgetStaticFiles(StaticFiles):
    """StaticFiles that marks every asset as loadable from any origin."""

    async def check_config(self) -> None:
        # Widgets may not be built yet; every lookup is then a 404
        if self.directory is not None and not os.path.isdir(self.directory):
            return
        await super().check_config()

    def file_response(
        self,
        full_path: str | os.PathLike[str],
        stat_result: os.stat_result,
        scope: Scope,
        status_code: int = 200,
    ) -> Response:
        response = super().file_response(full_path, stat_result, scope, status_code)
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["X-Content-Type-Options"] = "nosniff"
        if str(full_path).endswith(".html"):
            response.headers["Content-Type"] = "text/html; charset=utf-8"
        return response


def available_widgets(directory: Path) -> list[str]:
    """Names of the .html assets present in the widgets directory."""
    if not directory.is_dir():
        return []
    return sorted(p.name for p in directory.iterdir() if p.suffix == ".html" and p.is_file())


def describe_widgets(directory: Path, base_url: str) -> list[dict[str, Any]]:
    widgets = []
    for filename in available_widgets(directory):
        name = Path(filename).stem
        widgets.append(
            {
                "name": name,
                "url": f"{base_url.rstrip('/')}/widgets/{filename}",
                "description": WIDGET_DESCRIPTIONS.get(name, f"{name} widget"),
            }
        )
    return widgets


def mount_widgets(app: FastAPI, directory: Path) -> None:
    """Serve `directory` under /widgets. Register /widgets routes before calling this."""
    app.mount("/widgets", WidgetStaticFiles(directory=directory, check_dir=False), name="widgets")
