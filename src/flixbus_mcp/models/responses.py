from enum import Enum

from pydantic import BaseModel, Field

from flixbus_mcp.matching.models import StationSuggestion
from flixbus_mcp.models.pagination import PaginationContext
from flixbus_mcp.models.trips import ItineraryAnomaly, Trip


class QueryStatus(str, Enum):
    """Outcome of a search or continuation that did not fail."""

    OK = "ok"
    NO_LATER_RESULTS = "no_later_results"


class TripQueryResult(BaseModel):
    """Trips found by one search or continuation plus the context for the next page."""

    status: QueryStatus = QueryStatus.OK
    trips: list[Trip] = Field(default_factory=list)
    context: PaginationContext
    anomalies: list[ItineraryAnomaly] = Field(
        default_factory=list, description="Upstream problems that did not abort the search"
    )
    url: str | None = Field(default=None, description="Upstream request URL, if one was made")


class StationResolutionInfo(BaseModel):
    """How a station query was resolved."""

    query: str = Field(description="Original user query")
    resolved_station_id: str | None = None
    resolved_station_name: str | None = None
    confidence: str | None = Field(default=None, description="exact, high, medium, low")
    resolved: bool
    error: str | None = None


class QueryTripsResponse(BaseModel):
    """Response from the search_trips and query_more_trips tools."""

    # Resolution status (top-level searches only)
    origin_resolution: StationResolutionInfo | None = None
    destination_resolution: StationResolutionInfo | None = None

    # Results
    status: QueryStatus | None = None
    trips: list[Trip] = Field(default_factory=list)
    anomalies: list[ItineraryAnomaly] = Field(default_factory=list)
    context: PaginationContext | None = Field(
        default=None, description="Pass back to query_more_trips to page earlier/later"
    )

    # Status
    count: int = 0
    success: bool
    error: str | None = None


class SuggestStationsResponse(BaseModel):
    """Response from the suggest_stations tool."""

    query: str
    suggestions: list[StationSuggestion] = Field(default_factory=list)
    count: int = Field(description="Number of suggestions returned")
    success: bool = True
    error: str | None = None
