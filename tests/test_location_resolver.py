"""Tests for station resolution backed by network.json."""

import asyncio
from unittest.mock import AsyncMock

from conftest import network_document
from flixbus_mcp.data.cache import TTLCache
from flixbus_mcp.models.flixbus import NetworkResponse
from flixbus_mcp.services.location_resolver import LocationResolver


def _source() -> AsyncMock:
    source = AsyncMock()
    source.fetch_network = AsyncMock(
        return_value=NetworkResponse.model_validate(network_document())
    )
    return source


async def test_resolve_by_int_or_str_id():
    resolver = LocationResolver(_source(), TTLCache(ttl=60))

    by_int = await resolver.resolve(3)
    by_str = await resolver.resolve("3")

    assert by_int == by_str
    assert by_int.name == "München ZOB"
    assert by_int.place == "Arnulfstraße 21, 80335 München"


async def test_unknown_station_is_none():
    resolver = LocationResolver(_source(), TTLCache(ttl=60))

    assert await resolver.resolve(404) is None


async def test_station_list_fetched_once():
    source = _source()
    resolver = LocationResolver(source, TTLCache(ttl=60))

    await resolver.resolve(1)
    await resolver.resolve(2)
    await resolver.suggest("Hamburg")

    source.fetch_network.assert_awaited_once()


async def test_concurrent_lookups_share_one_fetch():
    source = _source()
    resolver = LocationResolver(source, TTLCache(ttl=60))

    results = await asyncio.gather(*(resolver.resolve(i) for i in (1, 2, 3)))

    assert [r.id for r in results] == ["1", "2", "3"]
    source.fetch_network.assert_awaited_once()


async def test_refetches_after_cache_cleared():
    source = _source()
    cache: TTLCache = TTLCache(ttl=60)
    resolver = LocationResolver(source, cache)

    await resolver.resolve(1)
    cache.clear()
    await resolver.resolve(1)

    assert source.fetch_network.await_count == 2


async def test_suggest():
    resolver = LocationResolver(_source(), TTLCache(ttl=60))

    suggestions = await resolver.suggest("Berlin", limit=1)

    assert len(suggestions) == 1
    assert suggestions[0].station.id == "1"
