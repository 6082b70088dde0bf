"""Shared fixtures for trip engine tests."""

from datetime import UTC, datetime
from typing import Any

import pytest

from flixbus_mcp.models.trips import Location


def ts(seconds: int) -> datetime:
    """Aware UTC datetime for epoch seconds."""
    return datetime.fromtimestamp(seconds, UTC)


def direct_item(uid: str, departure: int, arrival: int) -> dict[str, Any]:
    """A raw "direct" itinerary record."""
    return {
        "uid": uid,
        "type": "direct",
        "departure": {"timestamp": departure, "tz": "GMT+01:00"},
        "arrival": {"timestamp": arrival, "tz": "GMT+01:00"},
    }


def interconnection_item(
    uid: str, departure: int, arrival: int, transfers: list[tuple[int, int, int]]
) -> dict[str, Any]:
    """A raw "interconnection" record; transfers are (station_id, arrival, departure)."""
    return {
        "uid": uid,
        "type": "interconnection",
        "departure": {"timestamp": departure},
        "arrival": {"timestamp": arrival},
        "interconnection_transfers": [
            {
                "station_id": station_id,
                "arrival": {"timestamp": arr},
                "departure": {"timestamp": dep},
            }
            for station_id, arr, dep in transfers
        ],
    }


def search_document(*groupings: list[dict[str, Any]], from_id: int = 1, to_id: int = 2) -> dict:
    """A trip/search.json document with one grouping per list of items."""
    return {
        "trips": [
            {
                "from": {"id": from_id, "name": "Berlin ZOB"},
                "to": {"id": to_id, "name": "Hamburg ZOB"},
                "items": list(items),
            }
            for items in groupings
        ]
    }


def network_document() -> dict:
    """A network.json document with three stations."""
    return {
        "stations": [
            {
                "id": 1,
                "name": "Berlin ZOB",
                "full_address": "Masurenallee 4-6, 14057 Berlin",
                "aliases": "Berlin,Berlin Zentraler Omnibusbahnhof,ZOB Berlin",
                "coordinates": {"latitude": 52.507, "longitude": 13.279},
            },
            {
                "id": 2,
                "name": "Hamburg ZOB",
                "full_address": "Adenauerallee 78, 20097 Hamburg",
                "aliases": "Hamburg,Hamburg Hbf",
                "coordinates": {"latitude": 53.552, "longitude": 10.011},
            },
            {
                "id": 3,
                "name": "München ZOB",
                "full_address": "Arnulfstraße 21, 80335 München",
                "aliases": "Munich,Muenchen,Munchen Hbf",
                "coordinates": {"latitude": 48.142, "longitude": 11.550},
            },
        ]
    }


class FakeResolver:
    """Station lookup backed by a dict."""

    def __init__(self, locations: dict[str, Location]):
        self._locations = locations
        self.calls: list[str] = []

    async def resolve(self, station_id: int | str) -> Location | None:
        self.calls.append(str(station_id))
        return self._locations.get(str(station_id))


@pytest.fixture
def origin() -> Location:
    return Location(id="1", name="A")


@pytest.fixture
def destination() -> Location:
    return Location(id="2", name="B")


@pytest.fixture
def transfer_station() -> Location:
    return Location(id="3", name="C", lat=51.0, lon=10.0)


@pytest.fixture
def resolver(transfer_station: Location) -> FakeResolver:
    return FakeResolver({"3": transfer_station})
