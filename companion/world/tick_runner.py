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

"""Background scheduler for the companion's life loop.

Every cycle (CYCLE_INTERVAL_SECONDS of real time):
  - every TICK_EVERY_CYCLES cycles: advance the agent one simulated minute,
    and every PERSIST_EVERY_CYCLES cycles also persist the state;
  - broadcast a state snapshot;
  - every THINKING_EVERY_CYCLES cycles: start an LLM thinking call
    in the background (never awaited by the loop);
  - every RULE_THOUGHT_EVERY_CYCLES cycles: emit a rule-based thought.

Can coexist with pull-based ticks (POST /tick) because CompanionWorld
serializes access with an asyncio lock.
"""

from __future__ import annotations

import asyncio
import logging

from companion.config import (
    CYCLE_INTERVAL_SECONDS,
    PERSIST_EVERY_CYCLES,
    RULE_THOUGHT_EVERY_CYCLES,
    THINKING_EVERY_CYCLES,
    TICK_EVERY_CYCLES,
)
from companion.memory.base import StoreError

from .companion_world import CompanionWorld

logger = logging.getLogger(__name__)


class TickRunner:
    """Background asyncio task that periodically drives the companion.

    Args:
        world: The companion world to drive.
        interval_seconds: Real seconds between cycles.
        tick_every: Cycles per agent tick.
        persist_every: Cycles per state save (checked on tick cycles).
        thinking_every: Cycles per LLM thinking call.
        rule_thought_every: Cycles per rule-based thought.
    """

    def __init__(
        self,
        world: CompanionWorld,
        interval_seconds: float = CYCLE_INTERVAL_SECONDS,
        tick_every: int = TICK_EVERY_CYCLES,
        persist_every: int = PERSIST_EVERY_CYCLES,
        thinking_every: int = THINKING_EVERY_CYCLES,
        rule_thought_every: int = RULE_THOUGHT_EVERY_CYCLES,
    ):
        self._world = world
        self._interval_seconds = interval_seconds
        self._tick_every = tick_every
        self._persist_every = persist_every
        self._thinking_every = thinking_every
        self._rule_thought_every = rule_thought_every
        self._task: asyncio.Task | None = None
        self._running = False
        self._cycles_completed = 0
        self._ticks_completed = 0

    @property
    def running(self) -> bool:
        """Whether the background loop is currently running."""
        return self._running

    @property
    def cycles_completed(self) -> int:
        """Number of cycles completed since last start."""
        return self._cycles_completed

    @property
    def ticks_completed(self) -> int:
        """Number of agent ticks completed since last start."""
        return self._ticks_completed

    @property
    def interval_seconds(self) -> float:
        """Current interval between cycles in real seconds."""
        return self._interval_seconds

    async def start(self) -> None:
        """Start the background loop.

        Raises:
            RuntimeError: If already running.
        """
        if self._running:
            raise RuntimeError("Tick runner is already running.")
        self._running = True
        self._cycles_completed = 0
        self._ticks_completed = 0
        self._task = asyncio.create_task(self._loop())
        logger.info(
            "Tick runner started: interval=%.1fs, tick every %d cycles",
            self._interval_seconds,
            self._tick_every,
        )

    async def stop(self) -> None:
        """Gracefully stop the background loop."""
        if not self._running:
            return
        self._running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("Tick runner stopped after %d cycles.", self._cycles_completed)

    async def run_cycle(self) -> None:
        """Run one scheduler cycle."""
        self._cycles_completed += 1
        cycle = self._cycles_completed

        if cycle % self._tick_every == 0:
            await self._world.tick()
            self._ticks_completed += 1
            if cycle % self._persist_every == 0:
                try:
                    await self._world.save()
                except StoreError:
                    logger.exception("Failed to persist companion state")

        await self._world.publish_state()

        if cycle % self._thinking_every == 0:
            self._world.schedule_thinking()

        if cycle % self._rule_thought_every == 0:
            await self._world.rule_based_thought()

    async def _loop(self) -> None:
        """Internal loop that runs cycles until stopped."""
        while self._running:
            try:
                await self.run_cycle()
            except Exception:
                logger.exception("Error during background cycle")
            await asyncio.sleep(self._interval_seconds)
