"""Exceptions shared by every tutorial video front end."""

from pathlib import Path


class TutorialVideoError(Exception):
    """Base class for tutorial video errors."""


class VideoNotFoundError(TutorialVideoError):
    """Raised when a video id is not in the catalog."""

    def __init__(self, video_id: str, available_ids: list[str]):
        self.video_id = video_id
        self.available_ids = available_ids
        super().__init__(f"Video not found: {video_id}")


class InvalidArgumentsError(TutorialVideoError):
    """Raised when tool arguments fail schema validation."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Invalid arguments: {detail}")


class UnknownToolError(TutorialVideoError):
    """Raised when a tool name is not exposed by the adapter."""

    def __init__(self, name: str | None):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class AssetUnavailableError(TutorialVideoError):
    """Raised when the bundled player script has not been loaded."""

    def __init__(self, path: Path | None = None):
        self.path = path
        location = f" ({path})" if path else ""
        super().__init__(f"Web component not loaded{location}")


class BuildError(TutorialVideoError):
    """Raised when bundling the web component or widgets fails."""
