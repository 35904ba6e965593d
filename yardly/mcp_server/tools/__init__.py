"""MCP tools package."""

from yardly.mcp_server.tools.booking import register_booking_tools
from yardly.mcp_server.tools.favorite import register_favorite_tools
from yardly.mcp_server.tools.yard import register_yard_tools

__all__ = [
    "register_booking_tools",
    "register_favorite_tools",
    "register_yard_tools",
]
