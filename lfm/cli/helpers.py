from __future__ import annotations
import click
from ..config import load_typed_config
from ..version import __version__

from .shared import get_db


@click.group()
@click.version_option(version=__version__, prog_name="lost-found-matcher")
@click.option('--db', 'db_path', type=click.Path(), default=None, help='Record store path (overrides config)')
@click.option('--progress/--no-progress', default=None, help='Enable/disable progress logging (overrides config)')
@click.option('--progress-interval', type=int, default=None, help='Log progress every N items (overrides config)')
@click.pass_context
def cli(ctx: click.Context, db_path: str | None, progress: bool | None, progress_interval: int | None):
    """Lost-and-found record matching.

    \b
    TYPICAL WORKFLOW:
      lfm import-items reports.json   # Load lost/found reports
      lfm generate                    # Persist matches for all active lost items
      lfm user-matches USER_ID        # Review a reporter's matches
      lfm set-status MATCH_ID confirmed

    \b
    Troubleshooting:
      lfm match ITEM_ID       # Rank candidates without saving
      lfm diagnose ITEM_ID    # Show closest candidates with score breakdown
    """
    if not isinstance(ctx.obj, dict):
        ctx.obj = load_typed_config().to_dict()

    if db_path is not None:
        ctx.obj.setdefault('database', {})['path'] = db_path
    if progress is not None:
        ctx.obj.setdefault('logging', {})['progress_enabled'] = progress
    if progress_interval is not None:
        ctx.obj.setdefault('logging', {})['progress_interval'] = progress_interval


def fail(ctx: click.Context, message: str) -> None:
    """Print a red error line and exit with status 1."""
    click.echo(click.style(f"Error: {message}", fg='red'), err=True)
    ctx.exit(1)


__all__ = ["cli", "get_db", "fail"]
