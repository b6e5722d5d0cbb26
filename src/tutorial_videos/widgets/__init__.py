"""Static host for the HTML widgets rendered by MCP clients."""

from .static import WidgetStaticFiles, available_widgets, describe_widgets, mount_widgets

__all__ = ["WidgetStaticFiles", "available_widgets", "describe_widgets", "mount_widgets"]
