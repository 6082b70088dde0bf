"""Station suggestion service for free-text queries."""

import logging

from flixbus_mcp.models.errors import FlixbusError
from flixbus_mcp.models.responses import SuggestStationsResponse
from flixbus_mcp.services.trip_query import open_orchestrator

logger = logging.getLogger(__name__)


async def suggest_stations(query: str, limit: int = 5) -> SuggestStationsResponse:
    """Suggest FlixBus stations matching a name, alias or station id.

    Args:
        query: Station name, alias (e.g. "Muenchen ZOB") or numeric id
        limit: Maximum suggestions to return

    Returns:
        SuggestStationsResponse; failures are reported with success=False.
    """
    try:
        async with open_orchestrator() as (_, resolver):
            suggestions = await resolver.suggest(query, limit=limit)
    except FlixbusError as e:
        logger.warning(f"Station suggestion for {query!r} failed: {e}")
        return SuggestStationsResponse(query=query, count=0, success=False, error=str(e))

    return SuggestStationsResponse(query=query, suggestions=suggestions, count=len(suggestions))
