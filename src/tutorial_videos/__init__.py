"""
Tutorial Videos – a fixed catalog of tutorial videos served over REST, MCP and
a widget host.

This top-level package exposes the catalog models.
"""

from .models import (
    EmbedSnippet,
    ShowVideoArguments,
    ShowVideoResult,
    VideoRecord,
)

__all__ = [
    "EmbedSnippet",
    "ShowVideoArguments",
    "ShowVideoResult",
    "VideoRecord",
]
