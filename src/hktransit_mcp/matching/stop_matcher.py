from collections.abc import Iterable

from rapidfuzz import fuzz

from hktransit_mcp.matching.models import (
    MatchConfidence,
    MatchType,
    StopMatch,
    StopResolutionResponse,
    confidence_from_score,
)
from hktransit_mcp.matching.normalizers import get_meaningful_tokens, normalize_text
from hktransit_mcp.models.transit import TransitStop


def _compute_fuzzy_score(
    query_normalized: str,
    target_normalized: str,
    query_tokens: set[str],
) -> float:
    """Compute fuzzy match score using combination of algorithms.

    Uses token_set_ratio (handles word order) combined with partial_ratio
    (handles substrings), blended with query token coverage so that
    matching every search term beats matching a long shared prefix.

    Returns:
        Score in 0-100 range
    """
    token_score = fuzz.token_set_ratio(query_normalized, target_normalized)
    partial_score = fuzz.partial_ratio(query_normalized, target_normalized)
    base_score = token_score * 0.7 + partial_score * 0.3

    target_tokens = get_meaningful_tokens(target_normalized)
    if len(query_tokens) < 2 or not target_tokens:
        # Single words and CJK names (no separators) are best judged by
        # substring overlap alone
        return max(base_score, partial_score * 0.85 + token_score * 0.15)

    coverage = len(query_tokens & target_tokens) / len(query_tokens)
    score = base_score * 0.7 + coverage * 100 * 0.3
    if coverage == 1.0:
        score += min(10.0, len(query_tokens) * 4.0)
    return min(100.0, score)


def _stop_to_match(
    stop: TransitStop, matched_name: str, score: float, match_type: MatchType
) -> StopMatch:
    """Convert TransitStop to StopMatch with computed confidence."""
    return StopMatch(
        stop_id=stop.id,
        stop_name=stop.name,
        matched_name=matched_name,
        mode=stop.mode,
        company=stop.company,
        latitude=stop.coordinate.latitude,
        longitude=stop.coordinate.longitude,
        score=score,
        confidence=confidence_from_score(score, match_type),
        match_type=match_type,
    )


def resolve_stop(
    query: str,
    stops: Iterable[TransitStop],
    limit: int = 5,
    min_score: float = 60.0,
) -> StopResolutionResponse:
    """Resolve a query to matching stops.

    Resolution strategy (priority order):
    1. Exact id match (case-insensitive) -> score=100, confidence=EXACT
    2. Fuzzy name matching against every localized name -> score from rapidfuzz

    Args:
        query: Station code, stop id or name in any supported locale
        stops: Candidate stops, typically the loaded transit snapshot
        limit: Maximum number of results to return
        min_score: Minimum score threshold (0-100)

    Returns:
        StopResolutionResponse with matches and resolution status
    """
    query = query.strip()
    if not query:
        return StopResolutionResponse(query=query, matches=[], best_match=None, resolved=False)

    query_normalized = normalize_text(query)
    query_tokens = get_meaningful_tokens(query)
    query_id = query.upper()

    matches: list[StopMatch] = []
    for stop in stops:
        if stop.id.upper() == query_id:
            matches.append(_stop_to_match(stop, stop.id, 100.0, MatchType.ID_EXACT))
            continue

        best_score = 0.0
        best_name = stop.name
        for name in stop.display_name_by_locale.values():
            score = _compute_fuzzy_score(query_normalized, normalize_text(name), query_tokens)
            if score > best_score:
                best_score, best_name = score, name

        if best_score >= min_score:
            matches.append(_stop_to_match(stop, best_name, best_score, MatchType.FUZZY_NAME))

    # Exact ids first, then by score descending, then by stop id
    matches.sort(
        key=lambda m: (m.match_type is not MatchType.ID_EXACT, -m.score, m.stop_id)
    )
    matches = matches[:limit]

    best_match = matches[0] if matches else None
    resolved = best_match is not None and best_match.confidence in (
        MatchConfidence.EXACT,
        MatchConfidence.HIGH,
    )

    return StopResolutionResponse(
        query=query,
        matches=matches,
        best_match=best_match,
        resolved=resolved,
    )
