"""Fuzzy matching of free-text queries to FlixBus stations."""

from flixbus_mcp.matching.models import MatchConfidence, MatchType, StationSuggestion
from flixbus_mcp.matching.normalizers import (
    get_meaningful_tokens,
    normalize_text,
    remove_accents,
    split_aliases,
)
from flixbus_mcp.matching.search_index import IndexedStation, StationIndex, station_to_location
from flixbus_mcp.matching.station_matcher import match_stations

__all__ = [
    # Matcher
    "match_stations",
    # Index
    "IndexedStation",
    "StationIndex",
    "station_to_location",
    # Models
    "MatchConfidence",
    "MatchType",
    "StationSuggestion",
    # Normalizers
    "normalize_text",
    "remove_accents",
    "get_meaningful_tokens",
    "split_aliases",
]
