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

"""Abstract store interface for state snapshots and the interaction log.

Implementations:
  - InMemoryStore: dict/list-based store (testing, prototyping)
  - SQLiteMemoryStore: durable single-file store (desktop default)

Two concerns share one store:
  1. Keyed snapshots of the serialized agent state.
  2. An append-only log of interactions and thoughts, queried newest first.
"""

from __future__ import annotations

import abc
import time
from dataclasses import dataclass, field


class StoreError(RuntimeError):
    """Raised when the durable store cannot be opened, read or written."""


def _unix_now() -> int:
    return int(time.time())


@dataclass
class MemoryEntry:
    """A single log record.

    Attributes:
        kind: Category, e.g. "interaction", "user_speech", "thought".
        content: Human-readable text.
        weight: Emotional weight of the record (0-1).
        timestamp: Unix seconds when the record was written.
        memory_id: Store-assigned identifier (None until stored).
    """

    kind: str
    content: str
    weight: float = 0.5
    timestamp: int = field(default_factory=_unix_now)
    memory_id: int | None = None

    def as_text(self) -> str:
        """Prompt-friendly one-line rendering."""
        return f"[{self.kind}] {self.content}"


class MemoryStore(abc.ABC):
    """Abstract interface for snapshot persistence and the interaction log."""

    @abc.abstractmethod
    async def store(self, entry: MemoryEntry) -> int:
        """Append a log entry.

        Args:
            entry: The record to append. Its memory_id is set in place.

        Returns:
            The assigned memory_id.

        Raises:
            StoreError: If the write fails.
        """

    @abc.abstractmethod
    async def recent(self, limit: int = 10) -> list[MemoryEntry]:
        """Get the most recent log entries.

        Args:
            limit: Maximum number of results.

        Returns:
            Entries ordered by recency (newest first).
        """

    @abc.abstractmethod
    async def count(self) -> int:
        """Total number of log entries."""

    @abc.abstractmethod
    async def save_snapshot(self, key: str, value: str) -> None:
        """Insert or replace the snapshot stored under key.

        Raises:
            StoreError: If the write fails.
        """

    @abc.abstractmethod
    async def load_snapshot(self, key: str) -> str | None:
        """Return the snapshot stored under key, or None if absent.

        Raises:
            StoreError: If the read fails.
        """

    async def add(self, kind: str, content: str, weight: float = 0.5) -> int:
        """Convenience wrapper around store()."""
        return await self.store(MemoryEntry(kind=kind, content=content, weight=weight))

    async def recent_as_text(self, limit: int = 10) -> list[str]:
        """Most recent entries rendered as "[kind] content" lines."""
        return [entry.as_text() for entry in await self.recent(limit)]

    def close(self) -> None:
        """Release any underlying resources."""
