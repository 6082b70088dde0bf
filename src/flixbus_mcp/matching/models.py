from enum import Enum

from pydantic import BaseModel, Field

from flixbus_mcp.models.trips import Location


class MatchConfidence(str, Enum):
    """Confidence level for a station match.

    - EXACT: station id match
    - HIGH: score >= 85
    - MEDIUM: score >= 70
    - LOW: score >= 60
    """

    EXACT = "exact"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class MatchType(str, Enum):
    """Type of match found."""

    ID_EXACT = "id_exact"  # Numeric station id
    SUBSTRING = "substring"  # Query contained in name or aliases
    FUZZY_NAME = "fuzzy_name"


def confidence_from_score(score: float, match_type: MatchType) -> MatchConfidence:
    """Determine confidence level from score and match type."""
    if match_type == MatchType.ID_EXACT:
        return MatchConfidence.EXACT
    if score >= 85:
        return MatchConfidence.HIGH
    if score >= 70:
        return MatchConfidence.MEDIUM
    return MatchConfidence.LOW


class StationSuggestion(BaseModel):
    """A station proposed for a free-text query."""

    station: Location
    score: float = Field(description="Match score (0-100)")
    confidence: MatchConfidence
    match_type: MatchType
