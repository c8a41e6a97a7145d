from __future__ import annotations
"""Scoring engine for lost-to-found item matching.

This module defines dataclasses and a scoring function that evaluates a lost
report against a found report. It does NOT perform DB access itself; callers
should provide already-fetched items.

Design goals:
- Weighted additive scoring over a fixed 100-point maximum
- Transparent per-signal breakdown for diagnostics
- Keep pure / side-effect free for easy unit testing

The text signals are plain bag-of-words overlap (see :mod:`.text`). This is a
deliberate fidelity choice; no TF-IDF, stemming or embeddings.
"""

from dataclasses import dataclass, field
from typing import List, Tuple, TYPE_CHECKING

from .text import text_similarity
from .geo import distance_km

if TYPE_CHECKING:  # pragma: no cover
    from ..db.models import ItemRow

# --- Dataclasses -----------------------------------------------------------

@dataclass
class ScoreBreakdown:
    similarity: float
    matched_fields: Tuple[str, ...]
    category_score: float = 0.0
    title_score: float = 0.0
    description_score: float = 0.0
    tag_score: float = 0.0
    location_score: float = 0.0
    distance_km: float | None = None
    notes: List[str] = field(default_factory=list)

    @property
    def raw_score(self) -> float:
        """Points before normalization (0-100)."""
        return self.similarity * 100.0


# --- Scoring Configuration -------------------------------------------------

@dataclass(frozen=True)
class ScoringConfig:
    """Weights and field thresholds for the item scorer.

    The weights sum to max_score, so a pair that hits every signal at its
    maximum scores exactly 1.0:

        category 30 + title 25 + description 25 + tags 15 + location 5 = 100

    Location has two branches. With coordinates on both sides the score decays
    linearly to zero at location_radius_km. Without them, a flat
    location_name_bonus applies when one place name contains the other; that
    branch has no distance gate.
    """
    # score weights
    weight_category: float = 30
    weight_title: float = 25
    weight_description: float = 25
    weight_tags: float = 15
    weight_location: float = 5
    location_name_bonus: float = 3
    max_score: float = 100
    # field recording thresholds
    title_field_ratio: float = 0.3
    description_field_ratio: float = 0.2
    tags_field_score: float = 5
    location_field_score: float = 2
    # proximity
    location_radius_km: float = 5.0


DEFAULT_SCORING = ScoringConfig()


# --- Signal helpers ----------------------------------------------------------

def tag_overlap_count(lost_tags, found_tags) -> int:
    """Count lost tags that overlap some found tag.

    Two tags overlap when either is a case-insensitive substring of the other.
    """
    found_lower = [t.lower() for t in found_tags]
    count = 0
    for tag in lost_tags:
        tag_lower = tag.lower()
        if any(f in tag_lower or tag_lower in f for f in found_lower):
            count += 1
    return count


def _location_names_overlap(a: str, b: str) -> bool:
    a_lower = (a or "").lower()
    b_lower = (b or "").lower()
    return a_lower in b_lower or b_lower in a_lower


# --- Core Scoring Logic ----------------------------------------------------

def evaluate_pair(lost: ItemRow, found: ItemRow, cfg: ScoringConfig = DEFAULT_SCORING) -> ScoreBreakdown:
    """Compute a score breakdown for a lost item vs a found item.

    Argument order matters for tags: overlap is counted over the lost item's
    tags. Callers scoring from the found side still pass (lost, found).
    """
    notes: List[str] = []
    matched: List[str] = []
    score = 0.0

    # Category scoring
    category_score = 0.0
    if lost.category == found.category:
        category_score = cfg.weight_category
        matched.append("category")
        notes.append("category_exact")
    score += category_score

    # Title scoring
    title_ratio = text_similarity(lost.title, found.title)
    title_score = title_ratio * cfg.weight_title
    score += title_score
    if title_ratio > cfg.title_field_ratio:
        matched.append("title")
    notes.append(f"title_overlap:{title_ratio:.2f}")

    # Description scoring
    desc_ratio = text_similarity(lost.description, found.description)
    description_score = desc_ratio * cfg.weight_description
    score += description_score
    if desc_ratio > cfg.description_field_ratio:
        matched.append("description")
    notes.append(f"description_overlap:{desc_ratio:.2f}")

    # Tag scoring
    overlap = tag_overlap_count(lost.tags, found.tags)
    tag_score = (overlap / max(len(lost.tags), len(found.tags), 1)) * cfg.weight_tags
    score += tag_score
    if tag_score > cfg.tags_field_score:
        matched.append("tags")
    notes.append(f"tag_overlap:{overlap}")

    # Location scoring
    location_score = 0.0
    distance = None
    lost_coords = lost.location.coordinates
    found_coords = found.location.coordinates
    if lost_coords and found_coords:
        distance = distance_km(lost_coords, found_coords)
        if distance < cfg.location_radius_km:
            location_score = max(0.0, (cfg.location_radius_km - distance) / cfg.location_radius_km) * cfg.weight_location
            score += location_score
            if location_score > cfg.location_field_score:
                matched.append("location")
            notes.append(f"location_near:{distance:.2f}km")
        else:
            notes.append(f"location_far:{distance:.2f}km")
    elif _location_names_overlap(lost.location.name, found.location.name):
        location_score = cfg.location_name_bonus
        score += location_score
        matched.append("location")
        notes.append("location_name_overlap")

    return ScoreBreakdown(
        similarity=score / cfg.max_score,
        matched_fields=tuple(matched),
        category_score=category_score,
        title_score=title_score,
        description_score=description_score,
        tag_score=tag_score,
        location_score=location_score,
        distance_km=distance,
        notes=notes,
    )


__all__ = [
    "ScoreBreakdown",
    "ScoringConfig",
    "DEFAULT_SCORING",
    "tag_overlap_count",
    "evaluate_pair",
]
