"""Pydantic models for the meinfernbus mobile API documents.

Only the fields the trip engine reads are modelled; everything else in the
upstream payload is ignored.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

# 9999-12-31T23:59:59Z, the last instant datetime can represent
MAX_TIMESTAMP = 253_402_300_799


class EventTime(BaseModel):
    """A departure or arrival event. ``timestamp`` is seconds since epoch (UTC)."""

    model_config = ConfigDict(extra="ignore")

    timestamp: int = Field(ge=0, le=MAX_TIMESTAMP)
    tz: str | None = None  # e.g. "GMT+01:00", informational only


class Coordinates(BaseModel):
    model_config = ConfigDict(extra="ignore")

    latitude: float
    longitude: float


class StationRecord(BaseModel):
    """One station from network.json."""

    model_config = ConfigDict(extra="ignore")

    id: int | str
    name: str
    full_address: str | None = None
    aliases: str = ""
    coordinates: Coordinates | None = None


class NetworkResponse(BaseModel):
    """Top-level response from the network.json endpoint."""

    model_config = ConfigDict(extra="ignore")

    stations: list[StationRecord] = []


class InterconnectionTransfer(BaseModel):
    """A change of bus at an intermediate station."""

    model_config = ConfigDict(extra="ignore")

    station_id: int | str
    arrival: EventTime
    departure: EventTime


class DirectItinerary(BaseModel):
    """Itinerary served by a single bus."""

    model_config = ConfigDict(extra="ignore")

    type: Literal["direct"]
    uid: str
    departure: EventTime
    arrival: EventTime


class InterconnectionItinerary(BaseModel):
    """Itinerary made of several buses joined at transfer stations."""

    model_config = ConfigDict(extra="ignore")

    type: Literal["interconnection"]
    uid: str
    departure: EventTime
    arrival: EventTime
    interconnection_transfers: list[InterconnectionTransfer] = []


ItineraryRecord = Annotated[
    DirectItinerary | InterconnectionItinerary,
    Field(discriminator="type"),
]

# Items are validated one at a time so a bad record does not sink the search
itinerary_adapter: TypeAdapter[DirectItinerary | InterconnectionItinerary] = TypeAdapter(
    ItineraryRecord
)


class StationRef(BaseModel):
    """Station summary attached to a trip grouping."""

    model_config = ConfigDict(extra="ignore")

    id: int | str
    name: str | None = None


class TripGrouping(BaseModel):
    """All itineraries for one origin/destination station pair."""

    model_config = ConfigDict(extra="ignore")

    from_station: StationRef | None = Field(default=None, alias="from")
    to_station: StationRef | None = Field(default=None, alias="to")
    items: list[Any] = []


class SearchResponse(BaseModel):
    """Top-level response from the trip/search.json endpoint."""

    model_config = ConfigDict(extra="ignore")

    trips: list[TripGrouping]
