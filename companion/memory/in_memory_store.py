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

"""In-memory implementation of MemoryStore for testing and prototyping.

Nothing survives the process. Use SQLiteMemoryStore for real persistence.
"""

from __future__ import annotations

from .base import MemoryEntry, MemoryStore


class InMemoryStore(MemoryStore):
    """List-backed log plus dict-backed snapshots."""

    def __init__(self) -> None:
        self._entries: list[MemoryEntry] = []
        self._snapshots: dict[str, str] = {}

    async def store(self, entry: MemoryEntry) -> int:
        entry.memory_id = len(self._entries) + 1
        self._entries.append(entry)
        return entry.memory_id

    async def recent(self, limit: int = 10) -> list[MemoryEntry]:
        ordered = sorted(
            self._entries,
            key=lambda e: (e.timestamp, e.memory_id or 0),
            reverse=True,
        )
        return ordered[:limit]

    async def count(self) -> int:
        return len(self._entries)

    async def save_snapshot(self, key: str, value: str) -> None:
        self._snapshots[key] = value

    async def load_snapshot(self, key: str) -> str | None:
        return self._snapshots.get(key)
