"""Map a similarity score to a discrete match-quality tier.

Classification is independent of discovery: scores below the matching
engine's acceptance threshold still classify (as ``poor``).
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from enum import Enum

from ..errors import InvalidInputError


class MatchQuality(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


@dataclass(frozen=True)
class QualityAssessment:
    tier: MatchQuality
    confidence: str
    description: str


# Inclusive lower bounds, highest first
_TIERS = (
    (0.8, QualityAssessment(
        MatchQuality.EXCELLENT, "90%+",
        "Very high chance this is a match. Multiple matching criteria.")),
    (0.6, QualityAssessment(
        MatchQuality.GOOD, "70-89%",
        "Good chance this is a match. Several matching criteria.")),
    (0.4, QualityAssessment(
        MatchQuality.FAIR, "50-69%",
        "Possible match. Some matching criteria found.")),
)

_POOR = QualityAssessment(
    MatchQuality.POOR, "30-49%",
    "Low chance of match. Few matching criteria.")


def classify(similarity: float) -> QualityAssessment:
    """Classify a similarity in [0, 1].

    Raises:
        InvalidInputError: If similarity is NaN or outside [0, 1]
    """
    if math.isnan(similarity) or not 0.0 <= similarity <= 1.0:
        raise InvalidInputError(f"similarity must be within [0, 1]: {similarity}")
    for lower_bound, assessment in _TIERS:
        if similarity >= lower_bound:
            return assessment
    return _POOR


__all__ = ["MatchQuality", "QualityAssessment", "classify"]
