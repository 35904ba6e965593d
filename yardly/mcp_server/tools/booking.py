"""MCP tools for booking quotes."""

from mcp.server.fastmcp import FastMCP

from yardly.config import get_settings
from yardly.db.session import session_context
from yardly.errors import YardlyError
from yardly.services.booking_service import BookingService
from yardly.services.search import parse_datetime


def register_booking_tools(mcp: FastMCP) -> None:
    """Register booking-related tools on a FastMCP server."""

    @mcp.tool(name="quote_booking")
    async def quote_booking(
        yard_id: int, check_in: str, check_out: str, guests: int
    ) -> dict[str, object]:
        """Price a booking: hours x hourly rate plus a 10% service fee."""

        start = parse_datetime(check_in)
        end = parse_datetime(check_out)
        if start is None or end is None:
            return {
                "error": "check_in and check_out must be ISO-8601 datetimes",
                "success": False,
            }

        async with session_context() as session:
            service = BookingService(session, get_settings())
            try:
                result = await service.quote(yard_id, start, end, guests)
            except YardlyError as e:
                return {"error": e.message, "success": False}
        result["success"] = True
        return result
