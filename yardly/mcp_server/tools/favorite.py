"""MCP tools for favorite management."""

from typing import cast

from mcp.server.fastmcp import FastMCP

from yardly.db.session import session_context
from yardly.errors import YardlyError
from yardly.services.favorite_service import FavoriteService


def register_favorite_tools(mcp: FastMCP) -> None:
    """Register favorite-related tools on a FastMCP server."""

    @mcp.tool(name="toggle_favorite")
    async def toggle_favorite(user_id: str, yard_id: int) -> dict[str, object]:
        async with session_context() as session:
            service = FavoriteService(session)
            try:
                result = await service.toggle_favorite(user_id, yard_id)
            except YardlyError as e:
                return {"error": e.message, "success": False}
        result["success"] = True
        return result

    @mcp.tool(name="list_favorites")
    async def list_favorites(user_id: str, limit: int = 50) -> dict[str, object]:
        async with session_context() as session:
            service = FavoriteService(session)
            result = await service.list_favorites(user_id, limit)
        favorite_ids = cast(list[int], result["favorites"])
        return {**result, "count": len(favorite_ids)}
