"""Process-lifetime cache of the bundled player script."""

import asyncio
import logging
from pathlib import Path

from tutorial_videos.exceptions import AssetUnavailableError

logger = logging.getLogger(__name__)


class BundleCache:
    """Holds the bundled web component once it has been read from disk.

    The file is read at most once. If that read fails the cache stays empty
    until the process restarts.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._script: str | None = None
        self._attempted = False

    @property
    def script(self) -> str | None:
        return self._script

    @property
    def available(self) -> bool:
        return self._script is not None

    def require(self) -> str:
        if self._script is None:
            raise AssetUnavailableError(self.path)
        return self._script

    async def load(self) -> str | None:
        if self._attempted:
            return self._script
        self._attempted = True

        try:
            self._script = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
            logger.info(f"Web component loaded from {self.path}")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not load web component: {e}")
            logger.warning("Run: tutorial-videos-build web")
        return self._script
