"""SQLite-backed document store for per-user analysis history."""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Any, Dict, Optional
from uuid import uuid4


class HistoryStore:
    """Document collection keyed by id, queryable by owner and ordered by time.

    Writes replace whole documents or whole top-level fields; there is no
    version check, so concurrent writers to one document follow last write
    wins.
    """

    def __init__(self, db_path: str) -> None:
        self._db_path = Path(db_path)
        if self._db_path.parent and not self._db_path.parent.exists():
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS history_entries (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    timestamp TEXT NOT NULL,
                    data TEXT NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_history_owner_time
                ON history_entries (user_id, timestamp DESC)
                """
            )

    def add(self, *, user_id: str, timestamp: str, document: Dict[str, Any]) -> str:
        """Insert a new document and return its generated id."""
        entry_id = uuid4().hex
        data = {**document, "id": entry_id, "userId": user_id, "timestamp": timestamp}
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO history_entries (id, user_id, timestamp, data)
                VALUES (?, ?, ?, ?)
                """,
                (entry_id, user_id, timestamp, json.dumps(data)),
            )
        return entry_id

    def get(self, entry_id: str) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT data FROM history_entries WHERE id = ?",
                (entry_id,),
            ).fetchone()
        if not row:
            return None
        return json.loads(row["data"])

    def update_field(self, entry_id: str, path: str, value: Any) -> bool:
        """Overwrite one dotted field path (e.g. ``results.chatMessages``)."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT data FROM history_entries WHERE id = ?",
                (entry_id,),
            ).fetchone()
            if not row:
                return False
            document = json.loads(row["data"])
            target = document
            *parents, leaf = path.split(".")
            for key in parents:
                child = target.get(key)
                if not isinstance(child, dict):
                    child = {}
                    target[key] = child
                target = child
            target[leaf] = value
            conn.execute(
                "UPDATE history_entries SET data = ? WHERE id = ?",
                (json.dumps(document), entry_id),
            )
        return True

    def delete(self, entry_id: str) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM history_entries WHERE id = ?",
                (entry_id,),
            )
        return cursor.rowcount > 0

    def list_for_owner(self, user_id: str) -> list[Dict[str, Any]]:
        """Return the owner's documents, newest first."""
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT data FROM history_entries
                WHERE user_id = ?
                ORDER BY timestamp DESC
                """,
                (user_id,),
            ).fetchall()
        return [json.loads(row["data"]) for row in rows]

    def delete_for_owner(self, user_id: str) -> int:
        """Delete every document the owner has in one transaction."""
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM history_entries WHERE user_id = ?",
                (user_id,),
            )
        return cursor.rowcount


__all__ = ["HistoryStore"]
