"""Item import and listing commands."""

from __future__ import annotations
import json
import logging
from pathlib import Path

import click

from .helpers import cli, get_db, fail
from ..db.models import ItemKind, ItemRow, ItemStatus

logger = logging.getLogger(__name__)


@cli.command(name="import-items")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def import_items(ctx: click.Context, file: Path):
    """Create or update items from a JSON file.

    The file holds a list of items, or an object with an "items" list. Each
    item needs id, kind (lost/found) and category; location may be a plain
    name or {"name": ..., "coordinates": {"latitude": ..., "longitude": ...}}.

    \b
    Example:
        lfm import-items reports.json
    """
    cfg = ctx.obj
    try:
        payload = json.loads(file.read_text(encoding="utf-8"))
    except ValueError as e:
        fail(ctx, f"{file} is not valid JSON: {e}")
        return
    records = payload.get("items", []) if isinstance(payload, dict) else payload

    items = []
    for index, record in enumerate(records):
        try:
            items.append(ItemRow.from_dict(record))
        except (KeyError, TypeError, ValueError) as e:
            fail(ctx, f"item #{index} is invalid: {e}")
            return

    with get_db(cfg) as db:
        for item in items:
            db.upsert_item(item)
        db.commit()

    click.echo(click.style(f"✓ Imported {len(items)} item(s)", fg='green'))


@cli.command(name="list-items")
@click.option("--kind", type=click.Choice([k.value for k in ItemKind]), default=None, help="Filter by kind")
@click.option("--status", type=click.Choice([s.value for s in ItemStatus]), default=None, help="Filter by status")
@click.pass_context
def list_items(ctx: click.Context, kind: str | None, status: str | None):
    """List stored items."""
    cfg = ctx.obj
    with get_db(cfg) as db:
        rows = db.list_items(
            kind=ItemKind(kind) if kind else None,
            status=ItemStatus(status) if status else None,
        )
    for item in rows:
        click.echo(f"{item.id}\t{item.kind.value}\t{item.status.value}\t{item.category.value}\t{item.title}")
    click.echo(f"{len(rows)} item(s)")


__all__ = ["import_items", "list_items"]
