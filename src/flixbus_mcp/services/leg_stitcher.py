"""Turn one upstream itinerary record into an ordered list of legs.

A direct itinerary is a single leg from the requested origin to the
requested destination. An interconnection is split at each transfer
station: the traveller alights there (transfer arrival) and boards the next
bus (transfer departure), so ``n`` transfers give ``n + 1`` legs.
"""

from typing import Protocol

from flixbus_mcp.models.errors import MalformedItinerary
from flixbus_mcp.models.flixbus import DirectItinerary, InterconnectionItinerary
from flixbus_mcp.models.trips import FLIXBUS_LINE, Leg, Location, Stop
from flixbus_mcp.services.time_codec import decode_event_timestamp


class StationLookup(Protocol):
    async def resolve(self, station_id: int | str) -> Location | None: ...


async def stitch_itinerary(
    record: DirectItinerary | InterconnectionItinerary,
    origin: Location,
    destination: Location,
    resolver: StationLookup,
) -> list[Leg]:
    """Build the legs of one itinerary.

    Args:
        record: Validated itinerary record
        origin: Requested origin, used for the first boarding stop
        destination: Requested destination, used for the last alighting stop
        resolver: Station lookup for transfer stations

    Returns:
        Legs in travel order.

    Raises:
        MalformedItinerary: Unknown transfer station, or timestamps that do
            not move forward.
    """
    first_stop = Stop(
        location=origin,
        is_departure=True,
        time=decode_event_timestamp(record.departure.timestamp),
    )
    last_stop = Stop(
        location=destination,
        is_departure=False,
        time=decode_event_timestamp(record.arrival.timestamp),
    )

    departures = [first_stop]
    arrivals: list[Stop] = []

    if isinstance(record, InterconnectionItinerary):
        for transfer in record.interconnection_transfers:
            location = await resolver.resolve(transfer.station_id)
            if location is None:
                raise MalformedItinerary(
                    f"Unknown transfer station {transfer.station_id}", record.uid
                )
            arrivals.append(
                Stop(
                    location=location,
                    is_departure=False,
                    time=decode_event_timestamp(transfer.arrival.timestamp),
                )
            )
            departures.append(
                Stop(
                    location=location,
                    is_departure=True,
                    time=decode_event_timestamp(transfer.departure.timestamp),
                )
            )

    arrivals.append(last_stop)

    legs = [
        Leg(departure=dep, arrival=arr, line=FLIXBUS_LINE)
        for dep, arr in zip(departures, arrivals, strict=True)
    ]
    _check_leg_order(legs, record.uid)
    return legs


def _check_leg_order(legs: list[Leg], itinerary_id: str) -> None:
    """Each leg must move forward in time and never overlap the next one."""
    for i, leg in enumerate(legs):
        if leg.departure.time >= leg.arrival.time:
            raise MalformedItinerary(
                f"Leg {i} departs at {leg.departure.time.isoformat()} "
                f"but arrives at {leg.arrival.time.isoformat()}",
                itinerary_id,
            )
        if i + 1 < len(legs) and leg.arrival.time > legs[i + 1].departure.time:
            raise MalformedItinerary(
                f"Leg {i + 1} departs before leg {i} arrives", itinerary_id
            )
