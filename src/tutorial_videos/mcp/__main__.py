"""Entry point for running the stdio MCP server as a module."""

import asyncio
import logging
import sys

from tutorial_videos.api.settings import configure_logging

from .server import start_mcp_server

logger = logging.getLogger("tutorial_videos.mcp")


def main() -> None:
    # stdout carries the protocol, so logging goes to stderr
    configure_logging()

    try:
        asyncio.run(start_mcp_server())
    except KeyboardInterrupt:
        logger.info("MCP server shutdown gracefully")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
