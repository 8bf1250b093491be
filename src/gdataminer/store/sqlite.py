"""SQLite-backed store persisting resources across passes."""

from __future__ import annotations

import json
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional

from gdataminer.errors import StoreError
from gdataminer.util.time import parse_rfc3339, to_rfc3339

from .base import (
    CLEAR_RELATION,
    SET_CLOCK,
    SET_PROPERTY,
    SET_RELATION,
    LocalStore,
    ResourceHandle,
    WriteOp,
)

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS resources (
      local_id TEXT PRIMARY KEY,
      scope TEXT NOT NULL,
      mtime TEXT,
      observed INTEGER NOT NULL DEFAULT 0
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_resources_scope ON resources(scope)",
    """
    CREATE TABLE IF NOT EXISTS resource_types (
      local_id TEXT NOT NULL,
      type_tag TEXT NOT NULL,
      PRIMARY KEY (local_id, type_tag)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS properties (
      local_id TEXT NOT NULL,
      name TEXT NOT NULL,
      value_json TEXT,
      PRIMARY KEY (local_id, name)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS relations (
      local_id TEXT NOT NULL,
      name TEXT NOT NULL,
      target TEXT NOT NULL,
      PRIMARY KEY (local_id, name, target)
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_relations_target ON relations(target)",
)


class SqliteStore(LocalStore):
    """
    Persistent store on a single SQLite file.

    Notes:
        - One connection shared across threads, serialized by a lock.
        - Batches run in one transaction; a failing batch rolls back.
    """

    def __init__(self, db_path: str) -> None:
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()
        try:
            self._conn = sqlite3.connect(db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            with self._conn:
                for stmt in _SCHEMA:
                    self._conn.execute(stmt)
        except sqlite3.Error as exc:
            raise StoreError(
                "Failed to open store",
                details={"db_path": db_path},
                cause=exc,
            ) from exc

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def ensure_resource(
        self,
        scope: str,
        local_id: str,
        type_tags: Iterable[str],
        *,
        observed: bool = False,
    ) -> tuple[ResourceHandle, bool]:
        if not local_id:
            raise StoreError("local_id must be a non-empty string")

        with self._lock, _sqlite_errors("ensure_resource", local_id):
            with self._conn:
                cur = self._conn.execute(
                    "INSERT OR IGNORE INTO resources (local_id, scope) VALUES (?, ?)",
                    (local_id, scope),
                )
                existed = cur.rowcount == 0
                if observed:
                    self._conn.execute(
                        "UPDATE resources SET observed = 1 WHERE local_id = ?",
                        (local_id,),
                    )
                self._conn.executemany(
                    "INSERT OR IGNORE INTO resource_types (local_id, type_tag) VALUES (?, ?)",
                    [(local_id, tag) for tag in type_tags],
                )
                row = self._conn.execute(
                    "SELECT scope FROM resources WHERE local_id = ?",
                    (local_id,),
                ).fetchone()
            return ResourceHandle(local_id=local_id, scope=row["scope"]), existed

    def get_modification_clock(self, handle: ResourceHandle) -> Optional[datetime]:
        row = self._fetch_resource(handle.local_id)
        return parse_rfc3339(row["mtime"]) if row["mtime"] else None

    def list_known_identifiers(self, scope: str) -> set[str]:
        with self._lock, _sqlite_errors("list_known_identifiers", scope):
            rows = self._conn.execute(
                "SELECT local_id FROM resources WHERE scope = ?",
                (scope,),
            ).fetchall()
        return {row["local_id"] for row in rows}

    def list_observed_identifiers(self, scope: str) -> set[str]:
        with self._lock, _sqlite_errors("list_observed_identifiers", scope):
            rows = self._conn.execute(
                "SELECT local_id FROM resources WHERE scope = ? AND observed = 1",
                (scope,),
            ).fetchall()
        return {row["local_id"] for row in rows}

    def has_resource(self, local_id: str) -> bool:
        with self._lock, _sqlite_errors("has_resource", local_id):
            row = self._conn.execute(
                "SELECT 1 FROM resources WHERE local_id = ?",
                (local_id,),
            ).fetchone()
        return row is not None

    def get_types(self, local_id: str) -> set[str]:
        self._fetch_resource(local_id)
        with self._lock, _sqlite_errors("get_types", local_id):
            rows = self._conn.execute(
                "SELECT type_tag FROM resource_types WHERE local_id = ?",
                (local_id,),
            ).fetchall()
        return {row["type_tag"] for row in rows}

    def get_property(self, local_id: str, name: str) -> Any:
        self._fetch_resource(local_id)
        with self._lock, _sqlite_errors("get_property", local_id):
            row = self._conn.execute(
                "SELECT value_json FROM properties WHERE local_id = ? AND name = ?",
                (local_id, name),
            ).fetchone()
        return json.loads(row["value_json"]) if row else None

    def get_relations(self, local_id: str, name: str) -> set[str]:
        self._fetch_resource(local_id)
        with self._lock, _sqlite_errors("get_relations", local_id):
            rows = self._conn.execute(
                "SELECT target FROM relations WHERE local_id = ? AND name = ?",
                (local_id, name),
            ).fetchall()
        return {row["target"] for row in rows}

    def delete_resources(self, local_ids: Iterable[str]) -> int:
        ids = [(lid,) for lid in local_ids]
        with self._lock, _sqlite_errors("delete_resources", None):
            with self._conn:
                for table in ("resource_types", "properties", "relations"):
                    self._conn.executemany(f"DELETE FROM {table} WHERE local_id = ?", ids)
                self._conn.executemany("DELETE FROM relations WHERE target = ?", ids)
                before = self._conn.total_changes
                self._conn.executemany("DELETE FROM resources WHERE local_id = ?", ids)
                return self._conn.total_changes - before

    def _apply(self, ops: list[WriteOp]) -> None:
        with self._lock, _sqlite_errors("apply", None):
            for local_id in {op[1] for op in ops}:
                self._fetch_resource(local_id)
            with self._conn:
                for op, local_id, name, value in ops:
                    self._apply_one(op, local_id, name, value)

    def _apply_one(self, op: str, local_id: str, name: Optional[str], value: Any) -> None:
        if op == SET_CLOCK:
            cur = self._conn.execute(
                "UPDATE resources SET mtime = ? WHERE local_id = ?",
                (to_rfc3339(value), local_id),
            )
            if cur.rowcount == 0:
                raise StoreError("Unknown resource", details={"local_id": local_id})
        elif op == SET_PROPERTY:
            if value is None:
                self._conn.execute(
                    "DELETE FROM properties WHERE local_id = ? AND name = ?",
                    (local_id, name),
                )
            else:
                self._conn.execute(
                    "INSERT OR REPLACE INTO properties (local_id, name, value_json) "
                    "VALUES (?, ?, ?)",
                    (local_id, name, json.dumps(value)),
                )
        elif op == SET_RELATION:
            self._conn.execute(
                "INSERT OR IGNORE INTO relations (local_id, name, target) VALUES (?, ?, ?)",
                (local_id, name, value),
            )
        elif op == CLEAR_RELATION:
            self._conn.execute(
                "DELETE FROM relations WHERE local_id = ? AND name = ?",
                (local_id, name),
            )
        else:
            raise StoreError(f"Unsupported write op: {op}")

    def _fetch_resource(self, local_id: str) -> sqlite3.Row:
        with self._lock, _sqlite_errors("fetch_resource", local_id):
            row = self._conn.execute(
                "SELECT local_id, scope, mtime FROM resources WHERE local_id = ?",
                (local_id,),
            ).fetchone()
        if row is None:
            raise StoreError("Unknown resource", details={"local_id": local_id})
        return row


@contextmanager
def _sqlite_errors(operation: str, key: Optional[str]) -> Iterator[None]:
    """Translate sqlite3 errors into StoreError."""
    try:
        yield
    except sqlite3.Error as exc:
        raise StoreError(
            f"SQLite {operation} failed",
            details={"key": key},
            cause=exc,
        ) from exc
