"""MCP tools for yard search."""

from mcp.server.fastmcp import FastMCP

from yardly.db.session import session_context
from yardly.errors import YardlyError
from yardly.services.listing_service import ListingService
from yardly.services.search import SearchCriteria


def register_yard_tools(mcp: FastMCP) -> None:
    """Register yard-related tools on a FastMCP server."""

    @mcp.tool(name="search_yards")
    async def search_yards(
        city: str | None = None,
        guests: int | None = None,
        check_in: str | None = None,
        check_out: str | None = None,
        amenities: list[str] | None = None,
        price_range: str | None = None,
        limit: int = 50,
    ) -> dict[str, object]:
        criteria = SearchCriteria.from_params(
            {
                "city": city,
                "guests": guests,
                "check_in": check_in,
                "check_out": check_out,
                "amenities": amenities,
                "price_range": price_range,
            }
        )
        async with session_context() as session:
            service = ListingService(session)
            results = await service.search_yards(criteria, limit=limit)
        return {"count": len(results), "items": results}

    @mcp.tool(name="get_yard")
    async def get_yard(yard_id: int) -> dict[str, object]:
        async with session_context() as session:
            service = ListingService(session)
            try:
                return await service.get_yard(yard_id)
            except YardlyError as e:
                return {"error": e.message, "success": False}
