"""Trip search and pagination over the meinfernbus API.

``TripQueryOrchestrator`` runs one search per call: build the URL, fetch,
parse, fold the pagination context. It raises on transport and document
failures. The module-level ``search_trips``/``more_trips`` functions wrap it
for the MCP tools: they resolve station queries, open the HTTP client and
turn failures into an unsuccessful response.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Protocol

import httpx
from pydantic import ValidationError

from flixbus_mcp.data.cache import TTLCache
from flixbus_mcp.data.config import FlixbusConfig, get_flixbus_config
from flixbus_mcp.data.flixbus_client import FlixbusClient
from flixbus_mcp.matching import StationIndex
from flixbus_mcp.models.errors import FlixbusError, MalformedResponse
from flixbus_mcp.models.flixbus import SearchResponse
from flixbus_mcp.models.pagination import PaginationContext
from flixbus_mcp.models.responses import (
    QueryStatus,
    QueryTripsResponse,
    StationResolutionInfo,
    TripQueryResult,
)
from flixbus_mcp.models.trips import Location
from flixbus_mcp.services.leg_stitcher import StationLookup
from flixbus_mcp.services.location_resolver import LocationResolver
from flixbus_mcp.services.pagination import (
    earlier_anchor,
    later_anchor,
    next_context,
    select_earlier,
)
from flixbus_mcp.services.response_parser import ParsedTrips, parse_search_response
from flixbus_mcp.services.time_codec import encode_search_date, operator_zone, to_utc

logger = logging.getLogger(__name__)


class Transport(Protocol):
    async def fetch(self, url: str) -> bytes: ...


def build_search_url(
    config: FlixbusConfig,
    origin: Location,
    destination: Location,
    anchor: datetime,
) -> str:
    """Build the trip/search.json URL for a station pair and anchor day.

    Raises:
        ValueError: If origin or destination has no station id.
    """
    if origin.id is None or destination.id is None:
        raise ValueError("Origin and destination must have a station id")

    params = {
        "adult": config.adults,
        "back": 0,
        "bikes": config.bikes,
        "children": config.children,
        "currency": config.currency,
        "return_date": "",
        "departure_date": encode_search_date(anchor, config.operator_timezone),
        # search_by=cities would take city ids instead of station ids
        "from": origin.id,
        "to": destination.id,
    }
    return str(httpx.URL(config.search_url, params=params))


class TripQueryOrchestrator:
    """Runs trip searches and follow-up pages.

    Usage:
        orchestrator = TripQueryOrchestrator(client, resolver, config)
        first = await orchestrator.query_trips(origin, destination, anchor)
        earlier = await orchestrator.query_more_trips(first.context, later=False)
    """

    def __init__(self, transport: Transport, resolver: StationLookup, config: FlixbusConfig):
        self._transport = transport
        self._resolver = resolver
        self._config = config

    async def _search(
        self, origin: Location, destination: Location, anchor: datetime
    ) -> tuple[str, ParsedTrips]:
        url = build_search_url(self._config, origin, destination, anchor)
        body = await self._transport.fetch(url)

        try:
            response = SearchResponse.model_validate_json(body)
        except ValidationError as e:
            raise MalformedResponse(f"Cannot parse search response from {url}: {e}") from e

        parsed = await parse_search_response(response, anchor, origin, destination, self._resolver)
        logger.debug(
            f"{url}: {parsed.grouping_count} groupings, {len(parsed.trips)} trips, "
            f"{len(parsed.anomalies)} anomalies, earlier={parsed.has_earlier}"
        )
        return url, parsed

    async def query_trips(
        self, origin: Location, destination: Location, anchor: datetime
    ) -> TripQueryResult:
        """Search trips departing at or after ``anchor`` on its operator civil day.

        Raises:
            TransportError: If the request fails.
            MalformedResponse: If the response is not a search document.
        """
        anchor = to_utc(anchor)
        url, parsed = await self._search(origin, destination, anchor)

        context = PaginationContext.fresh(origin, destination, anchor).fold_trips(parsed.trips)
        context = context.model_copy(
            update={
                "can_query_earlier": parsed.has_earlier,
                "can_query_later": self._config.forward_paging and bool(parsed.trips),
            }
        )
        return TripQueryResult(
            trips=parsed.trips, context=context, anomalies=parsed.anomalies, url=url
        )

    async def query_more_trips(self, context: PaginationContext, later: bool) -> TripQueryResult:
        """Fetch the page before or after the trips already seen in ``context``.

        A later page that cannot exist is reported as NO_LATER_RESULTS, not
        raised.

        Raises:
            TransportError: If the request fails.
            MalformedResponse: If the response is not a search document.
        """
        if later:
            return await self._query_later(context)
        return await self._query_earlier(context)

    async def _query_later(self, context: PaginationContext) -> TripQueryResult:
        anchor = later_anchor(context)
        if anchor is None:
            return TripQueryResult(status=QueryStatus.NO_LATER_RESULTS, context=context)

        url, parsed = await self._search(context.origin, context.destination, anchor)
        new_context = next_context(
            context,
            anchor,
            parsed.trips,
            # anything skipped here was returned before or already flagged
            can_query_earlier=context.can_query_earlier,
            can_query_later=self._config.forward_paging and bool(parsed.trips),
        )
        return TripQueryResult(
            trips=parsed.trips, context=new_context, anomalies=parsed.anomalies, url=url
        )

    async def _query_earlier(self, context: PaginationContext) -> TripQueryResult:
        anchor = earlier_anchor(context, self._config.operator_timezone)
        if not context.can_query_earlier:
            logger.debug(f"No earlier trips flagged, retrying from {anchor.isoformat()}")

        url, parsed = await self._search(context.origin, context.destination, anchor)
        trips = select_earlier(parsed.trips, context)
        new_context = next_context(
            context,
            anchor,
            trips,
            can_query_earlier=parsed.has_earlier,
            can_query_later=context.can_query_later
            or (self._config.forward_paging and bool(trips)),
        )
        return TripQueryResult(
            trips=trips, context=new_context, anomalies=parsed.anomalies, url=url
        )


# Module-level state (lazy-initialized)
_network_cache: TTLCache[StationIndex] | None = None
_config: FlixbusConfig | None = None


def _get_config() -> FlixbusConfig:
    """Get or create the config singleton."""
    global _config
    if _config is None:
        _config = get_flixbus_config()
    return _config


def _get_network_cache() -> TTLCache[StationIndex]:
    """Get or create the station list cache singleton."""
    global _network_cache
    if _network_cache is None:
        _network_cache = TTLCache[StationIndex](ttl=_get_config().network_cache_ttl_seconds)
    return _network_cache


def reset_service() -> None:
    """Reset module state (for testing)."""
    global _network_cache, _config
    _network_cache = None
    _config = None


@asynccontextmanager
async def open_orchestrator() -> AsyncIterator[tuple[TripQueryOrchestrator, LocationResolver]]:
    """Open an HTTP client and yield an orchestrator and resolver sharing it."""
    config = _get_config()
    async with FlixbusClient(config) as client:
        resolver = LocationResolver(client, _get_network_cache())
        yield TripQueryOrchestrator(client, resolver, config), resolver


async def _resolve_station(resolver: LocationResolver, query: str) -> tuple[
    StationResolutionInfo, Location | None
]:
    """Resolve a station query (id or name) to its best match."""
    suggestions = await resolver.suggest(query, limit=1)
    if not suggestions:
        return (
            StationResolutionInfo(query=query, resolved=False, error="No matching station found"),
            None,
        )

    best = suggestions[0]
    return (
        StationResolutionInfo(
            query=query,
            resolved_station_id=best.station.id,
            resolved_station_name=best.station.name,
            confidence=best.confidence.value,
            resolved=True,
        ),
        best.station,
    )


def parse_departure_time(value: str | None, operator_timezone: str) -> datetime:
    """Parse an ISO 8601 departure time; naive values are operator-local.

    Raises:
        ValueError: If the value is not ISO 8601.
    """
    if value is None:
        return datetime.now(operator_zone(operator_timezone))
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=operator_zone(operator_timezone))
    return parsed


def _to_response(result: TripQueryResult, **extra) -> QueryTripsResponse:
    return QueryTripsResponse(
        status=result.status,
        trips=result.trips,
        anomalies=result.anomalies,
        context=result.context,
        count=len(result.trips),
        success=True,
        **extra,
    )


async def search_trips(
    origin: str,
    destination: str,
    departure_time: str | None = None,
) -> QueryTripsResponse:
    """Search trips between two stations.

    Args:
        origin: Origin station id or name
        destination: Destination station id or name
        departure_time: ISO 8601 time to search from (default: now);
            without an offset it is read in the operator's timezone

    Returns:
        QueryTripsResponse with trips and a pagination context. Failures are
        reported with success=False rather than raised.
    """
    config = _get_config()
    try:
        anchor = parse_departure_time(departure_time, config.operator_timezone)
    except ValueError:
        return QueryTripsResponse(
            success=False, error=f"Invalid departure_time {departure_time!r}, expected ISO 8601"
        )

    try:
        async with open_orchestrator() as (orchestrator, resolver):
            origin_res, origin_loc = await _resolve_station(resolver, origin)
            dest_res, dest_loc = await _resolve_station(resolver, destination)

            if origin_loc is None or dest_loc is None:
                return QueryTripsResponse(
                    origin_resolution=origin_res,
                    destination_resolution=dest_res,
                    success=False,
                    error="Could not resolve origin or destination station",
                )

            result = await orchestrator.query_trips(origin_loc, dest_loc, anchor)
    except FlixbusError as e:
        logger.warning(f"Trip search {origin!r} -> {destination!r} failed: {e}")
        return QueryTripsResponse(success=False, error=str(e))

    return _to_response(
        result, origin_resolution=origin_res, destination_resolution=dest_res
    )


async def more_trips(context: PaginationContext, later: bool = False) -> QueryTripsResponse:
    """Fetch the next earlier or later page for a previous search.

    Args:
        context: Context returned by the previous search or continuation
        later: True for later trips, False for earlier ones

    Returns:
        QueryTripsResponse with the new page and its context.
    """
    if context.origin.id is None or context.destination.id is None:
        return QueryTripsResponse(
            context=context,
            success=False,
            error="Context origin and destination must have a station id",
        )

    try:
        async with open_orchestrator() as (orchestrator, _):
            result = await orchestrator.query_more_trips(context, later=later)
    except FlixbusError as e:
        logger.warning(f"Follow-up search failed: {e}")
        return QueryTripsResponse(context=context, success=False, error=str(e))

    return _to_response(result)
