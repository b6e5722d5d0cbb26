"""Build step for the browser-side player element and widget pages."""

from .bundler import Bundle, Bundler, build_web_component, minify
from .widgets import build_widgets

__all__ = ["Bundle", "Bundler", "build_web_component", "build_widgets", "minify"]
