"""Shared utilities for CLI commands."""

from __future__ import annotations
from pathlib import Path
from ..db import Database


def get_db(cfg):
    """Get database instance from config.

    Args:
        cfg: Configuration dictionary

    Returns:
        Database instance
    """
    return Database(Path(cfg["database"]["path"]))
