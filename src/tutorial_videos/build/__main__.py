"""
Build the browser assets served by the tutorial video front ends.

Usage:
    tutorial-videos-build            # web component and widgets
    tutorial-videos-build web        # web/dist/tutorial-video-player.js (+ .map)
    tutorial-videos-build widgets    # web/dist/widgets/*.html
"""

import argparse
import logging
import sys
from pathlib import Path

from tutorial_videos.api.settings import PROJECT_ROOT, configure_logging, get_settings
from tutorial_videos.exceptions import BuildError

from .bundler import build_web_component
from .widgets import build_widgets

logger = logging.getLogger("tutorial_videos.build")

DEFAULT_ENTRY = PROJECT_ROOT / "web" / "src" / "index.js"
DEFAULT_WIDGET_SOURCES = PROJECT_ROOT / "web" / "widgets"

TARGETS = ("all", "web", "widgets")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Bundle the tutorial video web component and widgets")
    parser.add_argument("target", nargs="?", choices=TARGETS, default="all")
    parser.add_argument("--entry", type=Path, default=DEFAULT_ENTRY, help="Web component entry module")
    parser.add_argument("--outfile", type=Path, default=settings.bundle_path, help="Bundled script path")
    parser.add_argument("--widgets-src", type=Path, default=DEFAULT_WIDGET_SOURCES)
    parser.add_argument("--widgets-out", type=Path, default=settings.widgets_dir)
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> None:
    if args.target in ("all", "web"):
        logger.info("Building web component...")
        build_web_component(args.entry, args.outfile)
        logger.info(f"Web component built: {args.outfile}")

    if args.target in ("all", "widgets"):
        logger.info("Building widgets...")
        built = build_widgets(args.widgets_src, args.widgets_out)
        logger.info(f"All widgets built ({len(built)}): {args.widgets_out}")


def main(argv: list[str] | None = None) -> None:
    configure_logging()
    args = parse_args(argv)
    try:
        run(args)
    except BuildError as e:
        logger.error(f"Build failed: {e}")
        sys.exit(1)
    except OSError as e:
        logger.error(f"Build failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
