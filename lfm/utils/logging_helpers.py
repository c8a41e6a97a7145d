"""Logging helper utilities for consistent progress reporting."""

import logging
import click

logger = logging.getLogger(__name__)


def log_progress(
    processed: int,
    total: int | None,
    new: int = 0,
    skipped: int = 0,
    elapsed_seconds: float = 0.0,
    item_name: str = "items"
) -> None:
    """Log progress info with consistent formatting.

    Args:
        processed: Number of items processed so far
        total: Total number of items (None if unknown)
        new: Count of newly created records
        skipped: Count of items that produced nothing new
        elapsed_seconds: Time elapsed since start
        item_name: Name of items being processed (e.g., "lost items")
    """
    parts = [
        f"{click.style(f'{processed}', fg='cyan')} {item_name} processed"
    ]

    if total:
        pct = (processed / total * 100) if total > 0 else 0
        parts[0] = f"{click.style(f'{processed}/{total}', fg='cyan')} {item_name} ({pct:.0f}%)"

    if new > 0:
        parts.append(f"{click.style(f'{new} new', fg='green')}")
    if skipped > 0:
        parts.append(f"{click.style(f'{skipped} skipped', fg='yellow')}")

    if elapsed_seconds > 0:
        rate = processed / elapsed_seconds
        parts.append(f"{rate:.1f} {item_name}/s")

    logger.info(" | ".join(parts))


def format_tier_summary(tier_counts: dict) -> str:
    """Format quality tier counts as a colored one-line summary.

    Args:
        tier_counts: Mapping of tier name to count (e.g. {'excellent': 2})

    Returns:
        String like "2 excellent, 1 fair" or "none"
    """
    colors = {"excellent": "green", "good": "cyan", "fair": "yellow", "poor": "red"}
    parts = []
    for tier in ("excellent", "good", "fair", "poor"):
        count = tier_counts.get(tier, 0)
        if count > 0:
            parts.append(click.style(f"{count} {tier}", fg=colors[tier]))
    return ", ".join(parts) if parts else "none"


__all__ = ["log_progress", "format_tier_summary"]
