"""Station lookup backed by the upstream network.json station list.

The station list is fetched lazily and kept in an in-process TTL cache.
Transfer stations in search results only carry a numeric id, so the leg
stitcher resolves them here to get name and coordinates.
"""

import logging
from typing import Protocol

from flixbus_mcp.data.cache import TTLCache
from flixbus_mcp.matching import StationIndex, StationSuggestion, match_stations
from flixbus_mcp.models.flixbus import NetworkResponse
from flixbus_mcp.models.trips import Location

logger = logging.getLogger(__name__)


class NetworkSource(Protocol):
    async def fetch_network(self) -> NetworkResponse: ...


class LocationResolver:
    """Resolves station ids and free-text queries to Locations."""

    def __init__(self, source: NetworkSource, cache: TTLCache[StationIndex]):
        self._source = source
        self._cache = cache

    async def _get_index(self) -> StationIndex:
        """Return the station index, fetching network.json when the cache is stale."""
        cached = self._cache.get()
        if cached is not None:
            return cached

        async with self._cache.lock:
            # Double-check cache after acquiring lock
            cached = self._cache.get()
            if cached is not None:
                return cached

            network = await self._source.fetch_network()
            index = StationIndex.from_network(network)
            self._cache.set(index)
            logger.debug(f"Loaded {len(index)} stations from network.json")
            return index

    async def resolve(self, station_id: int | str) -> Location | None:
        """Look up a station by upstream id.

        Returns:
            The Location, or None if the id is not in the station list.
        """
        index = await self._get_index()
        return index.by_id.get(str(station_id))

    async def suggest(self, query: str, limit: int = 5) -> list[StationSuggestion]:
        """Suggest stations for a free-text query (or an exact numeric id)."""
        index = await self._get_index()
        return match_stations(query, index, limit=limit)
