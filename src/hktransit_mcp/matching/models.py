from enum import Enum

from pydantic import BaseModel, Field

from hktransit_mcp.models.transit import TransportMode


class MatchConfidence(str, Enum):
    """Confidence level for a match.

    - EXACT: score=100 AND exact id match
    - HIGH: score >= 85 (fuzzy matches only)
    - MEDIUM: score >= 70
    - LOW: score >= 60
    """

    EXACT = "exact"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class MatchType(str, Enum):
    """Type of match found."""

    ID_EXACT = "id_exact"  # Station code or stop id
    FUZZY_NAME = "fuzzy_name"  # Fuzzy match on any localized name


def confidence_from_score(score: float, match_type: MatchType) -> MatchConfidence:
    """Determine confidence level from score and match type.

    Exact id matches always return EXACT confidence.
    Fuzzy matches use score thresholds.
    """
    if match_type is MatchType.ID_EXACT:
        return MatchConfidence.EXACT

    if score >= 85:
        return MatchConfidence.HIGH
    if score >= 70:
        return MatchConfidence.MEDIUM
    return MatchConfidence.LOW


class StopMatch(BaseModel):
    """A matched stop with confidence information."""

    stop_id: str
    stop_name: str
    matched_name: str = Field(description="Localized name the query matched against")
    mode: TransportMode
    company: str = ""
    latitude: float
    longitude: float
    score: float = Field(description="Match score (0-100)")
    confidence: MatchConfidence = Field(description="Confidence level of the match")
    match_type: MatchType = Field(description="Type of match")


class StopResolutionResponse(BaseModel):
    """Response from resolve_stop."""

    query: str = Field(description="Original query string")
    matches: list[StopMatch] = Field(description="Matched stops, ordered by score")
    best_match: StopMatch | None = Field(
        default=None, description="Best match (always set to top match when matches exist)"
    )
    resolved: bool = Field(
        description="True if best_match has EXACT or HIGH confidence (safe to auto-use)"
    )
    success: bool = True
    error: str | None = None
