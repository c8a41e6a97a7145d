"""Matching package exposing the pure scoring primitives.

The DB-backed engine lives in :mod:`.matching_engine` and is imported
explicitly by callers so this package stays free of store dependencies.
"""

from .text import text_similarity
from .geo import distance_km, haversine_km, validate_coordinates
from .scoring import (
    ScoreBreakdown,
    ScoringConfig,
    evaluate_pair,
)
from .quality import MatchQuality, QualityAssessment, classify

__all__ = [
    "text_similarity",
    "distance_km",
    "haversine_km",
    "validate_coordinates",
    "ScoreBreakdown",
    "ScoringConfig",
    "evaluate_pair",
    "MatchQuality",
    "QualityAssessment",
    "classify",
]
