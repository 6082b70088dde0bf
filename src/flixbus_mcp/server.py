import argparse
import asyncio
import logging
from datetime import UTC, datetime

from pydantic import BaseModel

from flixbus_mcp.app import mcp
from flixbus_mcp.models.responses import QueryTripsResponse
from flixbus_mcp.tools import station_tools, trip_tools  # noqa: F401  (registers tools)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str


@mcp.tool()
def health() -> HealthResponse:
    """Check if the FlixBus MCP server is running and healthy.

    Returns the server status, version, and current timestamp.
    """
    from flixbus_mcp import __version__

    return HealthResponse(
        status="ok",
        version=__version__,
        timestamp=datetime.now(UTC).isoformat(),
    )


def format_trips(response: QueryTripsResponse) -> str:
    """Render a trip search response as plain text for the CLI."""
    if not response.success:
        return f"Error: {response.error}"

    lines = []
    for trip in response.trips:
        changes = "direct" if trip.num_changes == 0 else f"{trip.num_changes} change(s)"
        lines.append(
            f"{trip.departure_time:%Y-%m-%d %H:%M} -> {trip.arrival_time:%H:%M} UTC  "
            f"({changes})  [{trip.id}]"
        )
        for leg in trip.legs:
            lines.append(
                f"    {leg.departure.time:%H:%M} {leg.departure.location.name}"
                f" -> {leg.arrival.time:%H:%M} {leg.arrival.location.name}"
            )
    for anomaly in response.anomalies:
        lines.append(f"  ! {anomaly.kind.value}: {anomaly.reason}")
    if response.context is not None:
        lines.append(
            f"\n{response.count} trips. earlier: {response.context.can_query_earlier}, "
            f"later: {response.context.can_query_later}"
        )
    return "\n".join(lines)


async def run_search(origin: str, destination: str, departure_time: str | None) -> None:
    """Run one trip search and print the result."""
    from flixbus_mcp.services.trip_query import search_trips

    response = await search_trips(origin, destination, departure_time)
    print(format_trips(response))


async def run_stations(query: str, limit: int) -> None:
    """Print station suggestions."""
    from flixbus_mcp.services.station_service import suggest_stations

    response = await suggest_stations(query, limit=limit)
    if not response.success:
        print(f"Error: {response.error}")
        return
    for suggestion in response.suggestions:
        station = suggestion.station
        print(f"  {station.id:>6}  {station.name}  ({suggestion.confidence.value})")


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="flixbus-mcp",
        description="FlixBus Trips MCP Server",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    subparsers = parser.add_subparsers(dest="command")

    search_parser = subparsers.add_parser("search", help="Search trips between two stations")
    search_parser.add_argument("origin", help="Origin station id or name")
    search_parser.add_argument("destination", help="Destination station id or name")
    search_parser.add_argument(
        "--time",
        dest="departure_time",
        default=None,
        help="ISO 8601 departure time (default: now, Europe/Berlin if no offset)",
    )

    stations_parser = subparsers.add_parser("stations", help="Suggest stations for a query")
    stations_parser.add_argument("query", help="Station name, alias or id")
    stations_parser.add_argument("--limit", type=int, default=5)

    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "search":
        asyncio.run(run_search(args.origin, args.destination, args.departure_time))
    elif args.command == "stations":
        asyncio.run(run_stations(args.query, args.limit))
    else:
        # Default: run MCP server
        mcp.run()


if __name__ == "__main__":
    main()
