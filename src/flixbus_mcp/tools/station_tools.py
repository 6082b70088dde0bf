"""MCP tools for finding stations."""

from flixbus_mcp.app import mcp
from flixbus_mcp.models.responses import SuggestStationsResponse
from flixbus_mcp.services.station_service import suggest_stations as _suggest_stations


@mcp.tool()
async def suggest_stations(query: str, limit: int = 5) -> SuggestStationsResponse:
    """Find FlixBus stations by name, alias or station id.

    Examples:
        suggest_stations(query="Berlin ZOB")
        suggest_stations(query="munchen hbf")
        suggest_stations(query="1")  # station id

    Args:
        query: Station name, alias or numeric station id.
        limit: Maximum number of suggestions (1-20, default 5).

    Returns:
        SuggestStationsResponse with the best matches first.
    """
    limit = max(1, min(limit, 20))
    return await _suggest_stations(query=query, limit=limit)
