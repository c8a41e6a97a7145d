"""Diagnostic service for troubleshooting why an item isn't matching."""

from __future__ import annotations
from typing import List, Tuple
import logging

from ..db import DatabaseInterface
from ..db.models import ItemKind, ItemRow, MatchRow
from ..match.candidate_selector import CandidateSelector
from ..match.scoring import ScoreBreakdown, evaluate_pair
from ..errors import NotFoundError

logger = logging.getLogger(__name__)


class DiagnosticResult:
    """Result of diagnosing an item's match candidates."""

    def __init__(
        self,
        item: ItemRow,
        stored_matches: List[MatchRow] | None = None,
        closest: List[Tuple[ItemRow, ScoreBreakdown]] | None = None,
        pool_size: int = 0,
        min_similarity: float = 0.3,
    ):
        self.item = item
        self.stored_matches = stored_matches or []
        self.closest = closest or []
        self.pool_size = pool_size
        self.min_similarity = min_similarity


def diagnose_item(
    db: DatabaseInterface,
    item_id: str,
    top_n: int = 5,
    min_similarity: float = 0.3,
) -> DiagnosticResult:
    """Score an item against its whole candidate pool, ignoring thresholds.

    Unlike discovery, nothing is filtered out: the top_n closest candidates
    are returned with full breakdowns, including those below min_similarity
    and those already stored as matches.

    Raises:
        NotFoundError: If the item does not exist
    """
    item = db.get_item_by_id(item_id)
    if item is None:
        raise NotFoundError(f"item not found: {item_id}")

    pool = CandidateSelector(db).candidate_pool(item)
    scored: List[Tuple[ItemRow, ScoreBreakdown]] = []
    for candidate in pool:
        if item.kind is ItemKind.LOST:
            breakdown = evaluate_pair(item, candidate)
        else:
            breakdown = evaluate_pair(candidate, item)
        scored.append((candidate, breakdown))

    scored.sort(key=lambda x: x[1].similarity, reverse=True)

    return DiagnosticResult(
        item=item,
        stored_matches=db.get_matches_for_item(item_id),
        closest=scored[:top_n],
        pool_size=len(pool),
        min_similarity=min_similarity,
    )


def format_diagnostic_output(result: DiagnosticResult) -> str:
    """Render a DiagnosticResult as plain text lines."""
    item = result.item
    lines = [
        f"Item: {item.id} ({item.kind.value}, {item.category.value}, {item.status.value})",
        f"Title: {item.title}",
        f"Tags: {', '.join(item.tags) if item.tags else '-'}",
        f"Location: {item.location.name or '-'}",
        f"Stored matches: {len(result.stored_matches)}",
        f"Candidate pool: {result.pool_size} active {item.kind.opposite.value} item(s)",
        "",
    ]
    if not result.closest:
        lines.append("No candidates to score.")
        return "\n".join(lines)

    lines.append(f"Closest candidates (threshold > {result.min_similarity:.2f}):")
    for candidate, breakdown in result.closest:
        marker = "✓" if breakdown.similarity > result.min_similarity else "✗"
        lines.append(
            f"  {marker} {breakdown.similarity:.3f}  {candidate.id}  {candidate.title}"
        )
        lines.append(
            f"      category={breakdown.category_score:.1f} title={breakdown.title_score:.1f} "
            f"description={breakdown.description_score:.1f} tags={breakdown.tag_score:.1f} "
            f"location={breakdown.location_score:.1f}"
        )
    return "\n".join(lines)


__all__ = ["DiagnosticResult", "diagnose_item", "format_diagnostic_output"]
