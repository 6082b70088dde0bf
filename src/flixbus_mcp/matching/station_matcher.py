from rapidfuzz import fuzz

from flixbus_mcp.matching.models import (
    MatchType,
    StationSuggestion,
    confidence_from_score,
)
from flixbus_mcp.matching.normalizers import get_meaningful_tokens, normalize_text
from flixbus_mcp.matching.search_index import IndexedStation, StationIndex

MIN_SCORE = 60.0

# Substring hits on name or aliases never rank below this
SUBSTRING_SCORE = 90.0


def _compute_fuzzy_score(query_normalized: str, target_normalized: str) -> float:
    """Blend token_set_ratio (word order) and partial_ratio (substrings) with token coverage.

    Returns:
        Score in 0-100 range
    """
    token_score = fuzz.token_set_ratio(query_normalized, target_normalized)
    partial_score = fuzz.partial_ratio(query_normalized, target_normalized)
    base_score = token_score * 0.7 + partial_score * 0.3

    query_tokens = get_meaningful_tokens(query_normalized)
    target_tokens = get_meaningful_tokens(target_normalized)
    if not query_tokens or not target_tokens:
        return base_score

    overlap = query_tokens & target_tokens
    coverage = len(overlap) / len(query_tokens) * 0.7 + len(overlap) / len(target_tokens) * 0.3
    return base_score * 0.8 + coverage * 100 * 0.2


def _score_station(query_normalized: str, station: IndexedStation) -> tuple[float, MatchType]:
    candidates = (station.normalized_name, *station.normalized_aliases)
    score = max(_compute_fuzzy_score(query_normalized, c) for c in candidates)

    if any(query_normalized in c for c in candidates):
        return max(score, SUBSTRING_SCORE), MatchType.SUBSTRING
    return score, MatchType.FUZZY_NAME


def match_stations(query: str, index: StationIndex, limit: int = 5) -> list[StationSuggestion]:
    """Rank stations for a free-text query or a numeric station id.

    Args:
        query: Station id (e.g. "1") or name (e.g. "Berlin ZOB", "munchen hbf")
        index: Station index to search
        limit: Maximum number of suggestions

    Returns:
        Suggestions sorted by score, best first. Empty when nothing scores
        at least MIN_SCORE.
    """
    query = query.strip()
    if not query:
        return []

    if query.isdigit() and query in index.by_id:
        return [
            StationSuggestion(
                station=index.by_id[query],
                score=100.0,
                confidence=confidence_from_score(100.0, MatchType.ID_EXACT),
                match_type=MatchType.ID_EXACT,
            )
        ]

    query_normalized = normalize_text(query)
    scored: list[tuple[float, MatchType, IndexedStation]] = []
    for station in index.stations:
        score, match_type = _score_station(query_normalized, station)
        if score >= MIN_SCORE:
            scored.append((score, match_type, station))

    scored.sort(key=lambda s: (-s[0], s[2].location.name))

    return [
        StationSuggestion(
            station=station.location,
            score=round(score, 1),
            confidence=confidence_from_score(score, match_type),
            match_type=match_type,
        )
        for score, match_type, station in scored[:limit]
    ]
