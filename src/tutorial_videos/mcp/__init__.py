"""MCP (Model Context Protocol) servers for the tutorial video catalog.

The stdio server is built on FastMCP; the remote server speaks JSON-RPC over
SSE and also hosts the widget pages it links to.
"""

from .http_server import router as mcp_router

__all__ = ["mcp_router"]
