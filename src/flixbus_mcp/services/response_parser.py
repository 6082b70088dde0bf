"""Walk a trip/search.json response and assemble trips.

The API is documented to return exactly one grouping per station pair, but
every grouping present is processed and extra ones are flagged rather than
silently dropped. Itineraries departing before the anchor are left out and
only recorded, so a follow-up "earlier" query can fetch them.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from flixbus_mcp.models.errors import MalformedItinerary
from flixbus_mcp.models.flixbus import SearchResponse, StationRef, itinerary_adapter
from flixbus_mcp.models.trips import AnomalyKind, ItineraryAnomaly, Location, Trip
from flixbus_mcp.services.leg_stitcher import StationLookup, stitch_itinerary
from flixbus_mcp.services.time_codec import decode_event_timestamp

logger = logging.getLogger(__name__)


@dataclass
class ParsedTrips:
    """Outcome of parsing one search response."""

    trips: list[Trip] = field(default_factory=list)
    anomalies: list[ItineraryAnomaly] = field(default_factory=list)
    has_earlier: bool = False  # an itinerary before the anchor was skipped
    grouping_count: int = 0


def _same_station(ref: StationRef | None, location: Location) -> bool:
    if ref is None or location.id is None:
        return True
    return str(ref.id) == location.id


def _describe_error(e: ValidationError) -> str:
    first = e.errors()[0]
    loc = ".".join(str(p) for p in first["loc"])
    return f"{loc}: {first['msg']}" if loc else first["msg"]


async def parse_search_response(
    response: SearchResponse,
    anchor: datetime,
    origin: Location,
    destination: Location,
    resolver: StationLookup,
) -> ParsedTrips:
    """Assemble trips from a search response.

    Args:
        response: Validated search response document
        anchor: Instant searched from; itineraries departing strictly before it
            are excluded
        origin: Requested origin
        destination: Requested destination
        resolver: Station lookup for transfer stations

    Returns:
        ParsedTrips with trips ordered by departure time.
    """
    result = ParsedTrips(grouping_count=len(response.trips))

    if len(response.trips) > 1:
        logger.warning(
            f"Search {origin.id}->{destination.id} returned {len(response.trips)} groupings"
        )
        result.anomalies.append(
            ItineraryAnomaly(
                kind=AnomalyKind.MULTIPLE_GROUPINGS,
                reason=f"Expected one trip grouping, got {len(response.trips)}",
            )
        )

    for grouping in response.trips:
        if not (
            _same_station(grouping.from_station, origin)
            and _same_station(grouping.to_station, destination)
        ):
            from_id = grouping.from_station.id if grouping.from_station else None
            to_id = grouping.to_station.id if grouping.to_station else None
            logger.warning(
                f"Grouping {from_id}->{to_id} does not match requested "
                f"{origin.id}->{destination.id}"
            )
            result.anomalies.append(
                ItineraryAnomaly(
                    kind=AnomalyKind.UNEXPECTED_STATION_PAIR,
                    reason=f"Grouping is for {from_id}->{to_id}",
                )
            )

        for item in grouping.items:
            trip = await _parse_item(item, anchor, origin, destination, resolver, result)
            if trip is not None:
                result.trips.append(trip)

    result.trips.sort(key=lambda t: t.departure_time)
    return result


async def _parse_item(
    item: Any,
    anchor: datetime,
    origin: Location,
    destination: Location,
    resolver: StationLookup,
    result: ParsedTrips,
) -> Trip | None:
    """Parse one record; anomalies and the earlier flag are recorded on ``result``."""
    if not isinstance(item, dict):
        return _skip(result, None, f"Expected an object, got {type(item).__name__}")

    uid = item.get("uid")
    try:
        record = itinerary_adapter.validate_python(item)
    except ValidationError as e:
        return _skip(result, str(uid) if uid is not None else None, _describe_error(e))

    if decode_event_timestamp(record.departure.timestamp) < anchor:
        # Same day but before the anchor: reachable through an "earlier" query
        result.has_earlier = True
        return None

    try:
        legs = await stitch_itinerary(record, origin, destination, resolver)
    except MalformedItinerary as e:
        return _skip(result, record.uid, e.reason)

    return Trip(id=record.uid, origin=origin, destination=destination, legs=legs)


def _skip(result: ParsedTrips, itinerary_id: str | None, reason: str) -> None:
    logger.warning(f"Skipping itinerary {itinerary_id}: {reason}")
    result.anomalies.append(
        ItineraryAnomaly(
            kind=AnomalyKind.MALFORMED_ITINERARY,
            itinerary_id=itinerary_id,
            reason=reason,
        )
    )
    return None
