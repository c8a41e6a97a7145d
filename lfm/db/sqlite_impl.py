from __future__ import annotations
import json
import sqlite3
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .interface import DatabaseInterface
from .models import ItemRow, ItemKind, ItemStatus, MatchRow, MatchStatus
from ..errors import ConflictError, InvalidInputError, NotFoundError

logger = logging.getLogger(__name__)

SCHEMA = [
    "PRAGMA journal_mode=WAL;",
    "CREATE TABLE IF NOT EXISTS items (id TEXT PRIMARY KEY, kind TEXT NOT NULL, category TEXT NOT NULL, title TEXT NOT NULL DEFAULT '', description TEXT NOT NULL DEFAULT '', tags TEXT NOT NULL DEFAULT '[]', location_name TEXT NOT NULL DEFAULT '', latitude REAL, longitude REAL, status TEXT NOT NULL DEFAULT 'active', user_id TEXT, created_at TEXT NOT NULL, updated_at TEXT NOT NULL);",
    "CREATE TABLE IF NOT EXISTS matches (id TEXT PRIMARY KEY, lost_item_id TEXT NOT NULL REFERENCES items(id), found_item_id TEXT NOT NULL REFERENCES items(id), similarity REAL NOT NULL, matched_fields TEXT NOT NULL DEFAULT '[]', status TEXT NOT NULL DEFAULT 'pending', notes TEXT, created_at TEXT NOT NULL, last_updated TEXT NOT NULL);",
    # One match per unordered pair, enforced by the store itself
    "CREATE UNIQUE INDEX IF NOT EXISTS idx_matches_pair ON matches(min(lost_item_id, found_item_id), max(lost_item_id, found_item_id));",
    "CREATE INDEX IF NOT EXISTS idx_items_kind_status ON items(kind, status);",
    "CREATE INDEX IF NOT EXISTS idx_items_user ON items(user_id);",
    "CREATE INDEX IF NOT EXISTS idx_matches_lost ON matches(lost_item_id);",
    "CREATE INDEX IF NOT EXISTS idx_matches_found ON matches(found_item_id);",
    "CREATE TABLE IF NOT EXISTS meta (key TEXT PRIMARY KEY, value TEXT);",
]

_ITEM_COLUMNS = "id, kind, category, title, description, tags, location_name, latitude, longitude, status, user_id, created_at, updated_at"
_MATCH_COLUMNS = "id, lost_item_id, found_item_id, similarity, matched_fields, status, notes, created_at, last_updated"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class Database(DatabaseInterface):
    def __init__(self, path: Path):
        self.path = path
        if not path.parent.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(path, timeout=30)
        self.conn.row_factory = sqlite3.Row
        self._closed = False
        self._init_schema()

    def _init_schema(self) -> None:
        cur = self.conn.cursor()
        for stmt in SCHEMA:
            cur.execute(stmt)
        cur.execute("INSERT OR REPLACE INTO meta(key,value) VALUES('schema_version','1')")
        self.conn.commit()

    def _execute_with_lock_handling(self, sql: str, params: Any = None):
        """Execute SQL with better diagnostics on database lock (but let SQLite retry)."""
        try:
            if params is not None:
                return self.conn.execute(sql, params)
            return self.conn.execute(sql)
        except sqlite3.OperationalError as e:
            if "database is locked" in str(e).lower():
                logger.warning("Database lock detected - SQLite will retry for up to 30 seconds")
                logger.warning("If this persists, check for other processes holding a write transaction")
            raise

    # --- Items ---
    def upsert_item(self, item: ItemRow) -> ItemRow:
        data = item.to_dict()
        now = _now()
        self._execute_with_lock_handling(
            f"INSERT INTO items({_ITEM_COLUMNS}) VALUES(?,?,?,?,?,?,?,?,?,?,?,?,?) "
            "ON CONFLICT(id) DO UPDATE SET kind=excluded.kind, category=excluded.category, title=excluded.title, "
            "description=excluded.description, tags=excluded.tags, location_name=excluded.location_name, "
            "latitude=excluded.latitude, longitude=excluded.longitude, status=excluded.status, "
            "user_id=excluded.user_id, updated_at=excluded.updated_at",
            (
                data["id"], data["kind"], data["category"], data["title"], data["description"],
                json.dumps(data["tags"]), data["location_name"], data["latitude"], data["longitude"],
                data["status"], data["user_id"], data["created_at"] or now, now,
            ),
        )
        return self.get_item_by_id(item.id)  # type: ignore[return-value]

    def get_item_by_id(self, item_id: str) -> Optional[ItemRow]:
        row = self.conn.execute(f"SELECT {_ITEM_COLUMNS} FROM items WHERE id=?", (item_id,)).fetchone()
        return ItemRow.from_row(row) if row else None

    def list_items(self, kind: ItemKind | None = None, status: ItemStatus | None = None) -> List[ItemRow]:
        clauses, params = self._item_filters(kind, status)
        sql = f"SELECT {_ITEM_COLUMNS} FROM items{clauses} ORDER BY rowid"
        return [ItemRow.from_row(r) for r in self.conn.execute(sql, params).fetchall()]

    def get_items_by_user(self, user_id: str) -> List[ItemRow]:
        rows = self.conn.execute(
            f"SELECT {_ITEM_COLUMNS} FROM items WHERE user_id=? ORDER BY rowid", (user_id,)
        ).fetchall()
        return [ItemRow.from_row(r) for r in rows]

    def count_items(self, kind: ItemKind | None = None, status: ItemStatus | None = None) -> int:
        clauses, params = self._item_filters(kind, status)
        return self.conn.execute(f"SELECT COUNT(*) FROM items{clauses}", params).fetchone()[0]

    @staticmethod
    def _item_filters(kind: ItemKind | None, status: ItemStatus | None):
        conditions, params = [], []
        if kind is not None:
            conditions.append("kind=?")
            params.append(ItemKind(kind).value)
        if status is not None:
            conditions.append("status=?")
            params.append(ItemStatus(status).value)
        clauses = (" WHERE " + " AND ".join(conditions)) if conditions else ""
        return clauses, tuple(params)

    # --- Matches ---
    def get_matches_for_item(self, item_id: str) -> List[MatchRow]:
        rows = self.conn.execute(
            f"SELECT {_MATCH_COLUMNS} FROM matches WHERE lost_item_id=? OR found_item_id=? ORDER BY rowid",
            (item_id, item_id),
        ).fetchall()
        return [MatchRow.from_row(r) for r in rows]

    def add_match(
        self,
        lost_item_id: str,
        found_item_id: str,
        similarity: float,
        matched_fields: Sequence[str],
        status: MatchStatus = MatchStatus.PENDING,
    ) -> MatchRow:
        self._check_pair(lost_item_id, found_item_id, similarity)
        now = _now()
        match = MatchRow(
            id=uuid.uuid4().hex,
            lost_item_id=lost_item_id,
            found_item_id=found_item_id,
            similarity=similarity,
            matched_fields=tuple(matched_fields),
            status=MatchStatus(status),
            created_at=now,
            last_updated=now,
        )
        try:
            self._execute_with_lock_handling(
                f"INSERT INTO matches({_MATCH_COLUMNS}) VALUES(?,?,?,?,?,?,?,?,?)",
                (
                    match.id, match.lost_item_id, match.found_item_id, match.similarity,
                    json.dumps(list(match.matched_fields)), match.status.value, match.notes,
                    match.created_at, match.last_updated,
                ),
            )
        except sqlite3.IntegrityError as e:
            raise ConflictError(lost_item_id, found_item_id) from e
        return match

    def _check_pair(self, lost_item_id: str, found_item_id: str, similarity: float) -> None:
        if not 0.0 <= similarity <= 1.0:
            raise InvalidInputError(f"similarity must be within [0, 1]: {similarity}")
        lost = self.get_item_by_id(lost_item_id)
        found = self.get_item_by_id(found_item_id)
        if lost is None:
            raise NotFoundError(f"item not found: {lost_item_id}")
        if found is None:
            raise NotFoundError(f"item not found: {found_item_id}")
        if lost.kind is not ItemKind.LOST or found.kind is not ItemKind.FOUND:
            raise InvalidInputError(
                f"match must link a lost item to a found item, got ({lost.kind.value}, {found.kind.value})"
            )

    def update_match_status(self, match_id: str, status: MatchStatus, notes: str | None = None) -> Optional[MatchRow]:
        status = MatchStatus(status)
        cur = self._execute_with_lock_handling(
            "UPDATE matches SET status=?, notes=COALESCE(?, notes), last_updated=? WHERE id=?",
            (status.value, notes, _now(), match_id),
        )
        if cur.rowcount == 0:
            return None
        return self.get_match_by_id(match_id)

    def get_match_by_id(self, match_id: str) -> Optional[MatchRow]:
        row = self.conn.execute(f"SELECT {_MATCH_COLUMNS} FROM matches WHERE id=?", (match_id,)).fetchone()
        return MatchRow.from_row(row) if row else None

    def get_all_matches(self) -> List[MatchRow]:
        rows = self.conn.execute(f"SELECT {_MATCH_COLUMNS} FROM matches ORDER BY rowid").fetchall()
        return [MatchRow.from_row(r) for r in rows]

    def count_matches(self) -> int:
        return self.conn.execute("SELECT COUNT(*) FROM matches").fetchone()[0]

    def get_match_status_counts(self) -> Dict[str, int]:
        rows = self.conn.execute("SELECT status, COUNT(*) FROM matches GROUP BY status").fetchall()
        return {r[0]: r[1] for r in rows}

    # --- Meta / lifecycle ---
    def set_meta(self, key: str, value: str):
        self._execute_with_lock_handling(
            "INSERT INTO meta(key,value) VALUES(?,?) ON CONFLICT(key) DO UPDATE SET value=excluded.value",
            (key, value),
        )

    def get_meta(self, key: str) -> Optional[str]:
        row = self.conn.execute("SELECT value FROM meta WHERE key=?", (key,)).fetchone()
        return row[0] if row else None

    def commit(self):
        self.conn.commit()

    def close(self):
        if self._closed:
            return
        self.conn.commit()
        self.conn.close()
        self._closed = True


__all__ = ["Database"]
