"""Domain models for assembled trips."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field


class Location(BaseModel):
    """A station. Immutable once constructed."""

    model_config = ConfigDict(frozen=True)

    id: str | None = Field(default=None, description="Upstream station id")
    name: str
    place: str | None = Field(default=None, description="Full street address")
    lat: float | None = None
    lon: float | None = None


class Stop(BaseModel):
    """A boarding or alighting event at a location."""

    model_config = ConfigDict(frozen=True)

    location: Location
    is_departure: bool
    time: datetime = Field(description="Aware UTC instant")


class Line(BaseModel):
    """Carrier/line reference attached to each leg."""

    model_config = ConfigDict(frozen=True)

    network: str
    label: str
    product: str = "bus"


FLIXBUS_LINE = Line(network="FLIXBUS", label="FLIX")


class Leg(BaseModel):
    """One uninterrupted ride between a boarding and an alighting stop."""

    model_config = ConfigDict(frozen=True)

    departure: Stop
    arrival: Stop
    line: Line = FLIXBUS_LINE

    @computed_field
    @property
    def duration_minutes(self) -> int:
        return int((self.arrival.time - self.departure.time).total_seconds()) // 60


class Trip(BaseModel):
    """One way to travel from origin to destination."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Upstream itinerary uid")
    origin: Location
    destination: Location
    legs: list[Leg] = Field(min_length=1, description="Ordered list of legs")

    @computed_field
    @property
    def departure_time(self) -> datetime:
        return self.legs[0].departure.time

    @computed_field
    @property
    def arrival_time(self) -> datetime:
        return self.legs[-1].arrival.time

    @computed_field
    @property
    def num_changes(self) -> int:
        return len(self.legs) - 1


class AnomalyKind(str, Enum):
    """Kinds of upstream data problems reported next to a search result."""

    MALFORMED_ITINERARY = "malformed_itinerary"
    MULTIPLE_GROUPINGS = "multiple_groupings"
    UNEXPECTED_STATION_PAIR = "unexpected_station_pair"


class ItineraryAnomaly(BaseModel):
    """Something odd in the upstream response that did not abort the search."""

    model_config = ConfigDict(frozen=True)

    kind: AnomalyKind
    itinerary_id: str | None = None
    reason: str
