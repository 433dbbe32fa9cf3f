"""Fuzzy matching of free-text queries to transit stops."""

from hktransit_mcp.matching.models import (
    MatchConfidence,
    MatchType,
    StopMatch,
    StopResolutionResponse,
)
from hktransit_mcp.matching.normalizers import normalize_text, remove_accents
from hktransit_mcp.matching.stop_matcher import resolve_stop

__all__ = [
    # Matchers
    "resolve_stop",
    # Models
    "MatchConfidence",
    "MatchType",
    "StopMatch",
    "StopResolutionResponse",
    # Normalizers
    "normalize_text",
    "remove_accents",
]
