from flixbus_mcp.app import mcp
from flixbus_mcp.models.pagination import PaginationContext
from flixbus_mcp.models.responses import QueryTripsResponse
from flixbus_mcp.services.trip_query import more_trips as _more_trips
from flixbus_mcp.services.trip_query import search_trips as _search_trips


@mcp.tool()
async def search_trips(
    origin: str,
    destination: str,
    departure_time: str | None = None,
) -> QueryTripsResponse:
    """Search FlixBus trips between two stations.

    Returns every trip of the departure day that leaves at or after
    departure_time, including trips with changes.

    Args:
        origin: Origin station - id or name (e.g., "1", "Berlin ZOB")
        destination: Destination station - same format as origin
        departure_time: ISO 8601 date/time to search from (default: now).
                        Without an offset it is read as Europe/Berlin time.

    Returns:
        QueryTripsResponse with trips sorted by departure and a context to
        pass to query_more_trips.
    """
    return await _search_trips(
        origin=origin,
        destination=destination,
        departure_time=departure_time,
    )


@mcp.tool()
async def query_more_trips(context: PaginationContext, later: bool = False) -> QueryTripsResponse:
    """Fetch earlier or later trips for a previous search.

    Args:
        context: The context object returned by search_trips or a previous
                 query_more_trips call, unchanged.
        later: True for later trips, False for earlier trips the same day.

    Returns:
        QueryTripsResponse with only trips not returned before. status is
        "no_later_results" when later paging is not possible.
    """
    return await _more_trips(context=context, later=later)
