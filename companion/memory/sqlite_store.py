# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""SQLite-backed MemoryStore.

One database file holds two tables:
  memories        append-only interaction/thought log
  companion_state key -> serialized snapshot (insert or replace)

sqlite3 calls are blocking; each async method runs its query in a worker
thread, serialized by a lock on the shared connection.
"""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import threading
from pathlib import Path

from .base import MemoryEntry, MemoryStore, StoreError

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS memories (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    kind TEXT NOT NULL,
    content TEXT NOT NULL,
    weight REAL NOT NULL DEFAULT 0.5,
    timestamp INTEGER NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_memories_ts ON memories(timestamp DESC);
CREATE INDEX IF NOT EXISTS idx_memories_kind ON memories(kind);

CREATE TABLE IF NOT EXISTS companion_state (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""


class SQLiteMemoryStore(MemoryStore):
    """Durable store in a single SQLite file.

    Args:
        db_path: Database file. Parent directories are created.

    Raises:
        StoreError: If the database cannot be opened or initialized.
    """

    def __init__(self, db_path: Path | str) -> None:
        self._db_path = Path(db_path)
        self._lock = threading.Lock()
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self._db_path, check_same_thread=False)
            self._conn.executescript(_SCHEMA)
            self._conn.commit()
        except (OSError, sqlite3.Error) as e:
            raise StoreError(f"Failed to open store at {self._db_path}: {e}") from e
        logger.info("Opened memory store at %s", self._db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

    # --- Log ---

    def _store_sync(self, entry: MemoryEntry) -> int:
        with self._lock:
            try:
                cursor = self._conn.execute(
                    "INSERT INTO memories (kind, content, weight, timestamp) "
                    "VALUES (?, ?, ?, ?)",
                    (entry.kind, entry.content, entry.weight, entry.timestamp),
                )
                self._conn.commit()
            except sqlite3.Error as e:
                raise StoreError(f"Insert error: {e}") from e
        entry.memory_id = int(cursor.lastrowid)
        return entry.memory_id

    def _recent_sync(self, limit: int) -> list[MemoryEntry]:
        with self._lock:
            try:
                rows = self._conn.execute(
                    "SELECT id, kind, content, weight, timestamp FROM memories "
                    "ORDER BY timestamp DESC, id DESC LIMIT ?",
                    (limit,),
                ).fetchall()
            except sqlite3.Error as e:
                raise StoreError(f"Query error: {e}") from e
        return [
            MemoryEntry(
                memory_id=row[0],
                kind=row[1],
                content=row[2],
                weight=row[3],
                timestamp=row[4],
            )
            for row in rows
        ]

    def _count_sync(self) -> int:
        with self._lock:
            try:
                row = self._conn.execute("SELECT COUNT(*) FROM memories").fetchone()
            except sqlite3.Error as e:
                raise StoreError(f"Query error: {e}") from e
        return int(row[0])

    async def store(self, entry: MemoryEntry) -> int:
        return await asyncio.to_thread(self._store_sync, entry)

    async def recent(self, limit: int = 10) -> list[MemoryEntry]:
        return await asyncio.to_thread(self._recent_sync, limit)

    async def count(self) -> int:
        return await asyncio.to_thread(self._count_sync)

    # --- Snapshots ---

    def _save_snapshot_sync(self, key: str, value: str) -> None:
        with self._lock:
            try:
                self._conn.execute(
                    "INSERT OR REPLACE INTO companion_state (key, value) VALUES (?, ?)",
                    (key, value),
                )
                self._conn.commit()
            except sqlite3.Error as e:
                raise StoreError(f"Save state error: {e}") from e

    def _load_snapshot_sync(self, key: str) -> str | None:
        with self._lock:
            try:
                row = self._conn.execute(
                    "SELECT value FROM companion_state WHERE key = ?",
                    (key,),
                ).fetchone()
            except sqlite3.Error as e:
                raise StoreError(f"Load state error: {e}") from e
        return None if row is None else row[0]

    async def save_snapshot(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._save_snapshot_sync, key, value)

    async def load_snapshot(self, key: str) -> str | None:
        return await asyncio.to_thread(self._load_snapshot_sync, key)

    def close(self) -> None:
        with self._lock:
            self._conn.close()
