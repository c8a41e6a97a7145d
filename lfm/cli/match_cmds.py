"""Matching commands: discovery, bulk generation and match review."""

from __future__ import annotations
import logging

import click

from .helpers import cli, get_db, fail
from ..db.models import MatchRow, MatchStatus
from ..errors import MatchingError
from ..match.quality import classify as classify_similarity
from ..services import match_service
from ..services.diagnostic_service import diagnose_item, format_diagnostic_output

logger = logging.getLogger(__name__)

_TIER_COLORS = {"excellent": "green", "good": "cyan", "fair": "yellow", "poor": "red"}


def _format_match(match: MatchRow) -> str:
    quality = classify_similarity(match.similarity)
    tier = click.style(f"{quality.tier.value:<9}", fg=_TIER_COLORS[quality.tier.value])
    ident = f"{match.id}  " if match.id else ""
    return (
        f"{ident}{match.similarity:.3f} {tier} lost={match.lost_item_id} found={match.found_item_id} "
        f"[{', '.join(match.matched_fields)}] {match.status.value}"
    )


@cli.command()
@click.argument("item_id")
@click.pass_context
def match(ctx: click.Context, item_id: str):
    """Rank candidate matches for a lost or found item (nothing is saved).

    \b
    Example:
        lfm match lost-42
    """
    cfg = ctx.obj
    with get_db(cfg) as db:
        try:
            matches = match_service.find_matches(db, cfg, item_id)
        except MatchingError as e:
            fail(ctx, str(e))
            return

    click.echo(click.style(f"=== Candidates for {item_id} ===", fg='cyan', bold=True))
    if not matches:
        click.echo("⚠ No candidates above the similarity threshold")
        return
    for m in matches:
        click.echo(_format_match(m))


@cli.command()
@click.pass_context
def generate(ctx: click.Context):
    """Find and save matches for every active lost item.

    Pairs that already have a stored match are skipped, so running this
    repeatedly only adds matches for new or changed items.
    """
    cfg = ctx.obj
    click.echo(click.style("=== Generating matches ===", fg='cyan', bold=True))
    with get_db(cfg) as db:
        try:
            result = match_service.run_matching(db, cfg)
        except MatchingError as e:
            fail(ctx, str(e))
            return
    click.echo(f"Created {result.matched} match(es); {result.total_matches} stored in total")


@cli.command(name="show-match")
@click.argument("match_id")
@click.pass_context
def show_match(ctx: click.Context, match_id: str):
    """Show a stored match with both items and its quality tier."""
    cfg = ctx.obj
    with get_db(cfg) as db:
        try:
            details = match_service.get_match_with_details(db, match_id)
        except MatchingError as e:
            fail(ctx, str(e))
            return

    q = details.quality
    click.echo(_format_match(details.match))
    click.echo(f"Quality: {q.tier.value} ({q.confidence}) - {q.description}")
    click.echo(f"Lost:  {details.lost_item.title} @ {details.lost_item.location.name or '-'}")
    click.echo(f"Found: {details.found_item.title} @ {details.found_item.location.name or '-'}")
    if details.match.notes:
        click.echo(f"Notes: {details.match.notes}")


@cli.command(name="set-status")
@click.argument("match_id")
@click.argument("status", type=click.Choice([s.value for s in MatchStatus]))
@click.option("--notes", type=str, default=None, help="Reviewer notes (previous notes kept when omitted)")
@click.pass_context
def set_status(ctx: click.Context, match_id: str, status: str, notes: str | None):
    """Update the review status of a stored match."""
    cfg = ctx.obj
    with get_db(cfg) as db:
        try:
            updated = match_service.update_match_status(db, match_id, status, notes)
        except MatchingError as e:
            fail(ctx, str(e))
            return
    click.echo(click.style(f"✓ Match {updated.id} is now {updated.status.value}", fg='green'))


@cli.command(name="user-matches")
@click.argument("user_id")
@click.pass_context
def user_matches(ctx: click.Context, user_id: str):
    """List stored matches involving any item reported by USER_ID."""
    cfg = ctx.obj
    with get_db(cfg) as db:
        matches = match_service.get_user_matches(db, user_id)
    for m in matches:
        click.echo(_format_match(m))
    click.echo(f"{len(matches)} match(es)")


@cli.command()
@click.argument("item_id")
@click.option("--top", "top_n", type=int, default=None, help="Number of closest candidates to show")
@click.pass_context
def diagnose(ctx: click.Context, item_id: str, top_n: int | None):
    """Diagnose why an item isn't matching.

    Scores the item against its whole candidate pool, including candidates
    below the threshold, and prints the per-signal breakdown.
    """
    cfg = ctx.obj
    matching = cfg.get('matching', {})
    if top_n is None:
        top_n = int(matching.get('diagnose_top_n', 5))
    with get_db(cfg) as db:
        try:
            result = diagnose_item(db, item_id, top_n=top_n, min_similarity=float(matching.get('min_similarity', 0.3)))
        except MatchingError as e:
            fail(ctx, str(e))
            return
    click.echo(format_diagnostic_output(result))


@cli.command()
@click.argument("score", type=float)
@click.pass_context
def classify(ctx: click.Context, score: float):
    """Print the quality tier for a similarity SCORE in [0, 1]."""
    try:
        q = classify_similarity(score)
    except MatchingError as e:
        fail(ctx, str(e))
        return
    click.echo(f"{q.tier.value}\t{q.confidence}\t{q.description}")


__all__ = ["match", "generate", "show_match", "set_status", "user_matches", "diagnose", "classify"]
