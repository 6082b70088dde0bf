from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field

from flixbus_mcp.models.trips import Location, Trip


class ContextState(str, Enum):
    """FRESH until a trip boundary has been recorded, ACTIVE afterwards."""

    FRESH = "fresh"
    ACTIVE = "active"


class PaginationContext(BaseModel):
    """Everything needed to fetch the next page of a trip search.

    The context is a frozen value: folding in trips returns a new context.
    Callers hand it back unchanged to ``query_more_trips``; one context
    belongs to one pagination session.
    """

    model_config = ConfigDict(frozen=True)

    origin: Location
    destination: Location
    anchor: datetime = Field(description="Instant the page was searched from (UTC)")
    can_query_earlier: bool = False
    can_query_later: bool = False
    last_departure: datetime | None = Field(
        default=None, description="Latest departure seen in this session"
    )
    first_arrival: datetime | None = Field(
        default=None, description="Earliest arrival seen in this session"
    )

    @classmethod
    def fresh(cls, origin: Location, destination: Location, anchor: datetime) -> "PaginationContext":
        return cls(origin=origin, destination=destination, anchor=anchor)

    @computed_field
    @property
    def state(self) -> ContextState:
        if self.last_departure is None and self.first_arrival is None:
            return ContextState.FRESH
        return ContextState.ACTIVE

    def fold_trip(self, trip: Trip) -> "PaginationContext":
        """Widen the session window with one trip's boundary timestamps."""
        last_departure = trip.departure_time
        if self.last_departure is not None:
            last_departure = max(self.last_departure, last_departure)

        first_arrival = trip.arrival_time
        if self.first_arrival is not None:
            first_arrival = min(self.first_arrival, first_arrival)

        return self.model_copy(
            update={"last_departure": last_departure, "first_arrival": first_arrival}
        )

    def fold_trips(self, trips: list[Trip]) -> "PaginationContext":
        context = self
        for trip in trips:
            context = context.fold_trip(trip)
        return context
