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

"""Single owner of the companion's AgentState.

All reads and writes of the state happen under one asyncio lock. Slow
work - text generation and durable writes - runs after the lock is
released, on immutable copies taken while it was held. Results flow back
to the front-end as events on a queue; they never touch drives or
affinities.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from datetime import datetime
from typing import Any

from companion.config import (
    MAX_PENDING_EVENTS,
    PROMPT_RECENT_MEMORIES,
    SPEECH_MAX_TOKENS,
    SPEECH_TEMPERATURE,
    STATE_KEY,
    THINKING_MAX_TOKENS,
    THINKING_TEMPERATURE,
)
from companion.llm.client import LLMError, TextGenerationClient
from companion.llm.parsing import (
    ThinkingResult,
    action_to_behavior,
    is_displayable,
    parse_speech_response,
    parse_thinking_response,
)
from companion.llm.prompts import (
    PromptContext,
    build_speech_response_prompt,
    build_thinking_prompt,
)
from companion.memory.base import MemoryEntry, MemoryStore, StoreError
from companion.memory.in_memory_store import InMemoryStore
from companion.models.events import (
    CompanionEvent,
    CompanionSnapshot,
    SpeechResponseEvent,
    StateUpdateEvent,
    ThoughtEvent,
)
from companion.simulation.agent_state import AgentState, unix_now
from companion.simulation.behavior_oracle import BehaviorOracle
from companion.simulation.thought_engine import ThoughtEngine

from .serialization import dumps_state, loads_state

logger = logging.getLogger(__name__)


def local_hour() -> int:
    return datetime.now().hour


class CompanionWorld:
    """Guarded owner of the agent, its log and its collaborators.

    Args:
        store: Snapshot + log store. Defaults to an InMemoryStore.
        llm: Text-generation client. Defaults to an unconfigured client.
        state: Initial agent state. Defaults to a fresh agent.
        oracle: Behavior decision function.
        thoughts: Rule-based thought generator.
        clock: Returns wall-clock Unix seconds.
        hour_of_day: Returns the local hour (0-23).
        state_key: Key under which snapshots are persisted.
        max_pending_events: Queue bound; oldest events are dropped past it.
    """

    def __init__(
        self,
        store: MemoryStore | None = None,
        llm: TextGenerationClient | None = None,
        state: AgentState | None = None,
        oracle: BehaviorOracle | None = None,
        thoughts: ThoughtEngine | None = None,
        clock: Callable[[], int] = unix_now,
        hour_of_day: Callable[[], int] = local_hour,
        state_key: str = STATE_KEY,
        max_pending_events: int = MAX_PENDING_EVENTS,
    ):
        self._store = store if store is not None else InMemoryStore()
        self._llm = llm if llm is not None else TextGenerationClient()
        self._clock = clock
        self._hour_of_day = hour_of_day
        self._state = state if state is not None else AgentState.fresh(clock())
        self._oracle = oracle if oracle is not None else BehaviorOracle()
        self._thoughts = thoughts if thoughts is not None else ThoughtEngine()
        self._state_key = state_key
        self._lock = asyncio.Lock()
        self._events: asyncio.Queue[CompanionEvent] = asyncio.Queue(
            maxsize=max_pending_events
        )
        self._pending: set[asyncio.Task] = set()

    @property
    def llm_available(self) -> bool:
        return self._llm.available

    @property
    def pending_tasks(self) -> int:
        return len(self._pending)

    # --- Helpers (call with the lock held) ---

    def _make_snapshot(self) -> CompanionSnapshot:
        state = self._state
        behavior = self._oracle.decide(state, self._hour_of_day())
        return CompanionSnapshot(
            energy=state.physiological.energy,
            hunger=state.physiological.hunger,
            sleepiness=state.physiological.sleepiness,
            emotion=state.emotion,
            trust=state.relationship.trust,
            intimacy=state.relationship.intimacy,
            understanding=state.relationship.understanding,
            is_sleeping=state.is_sleeping,
            behavior=behavior,
            flip_direction=self._oracle.flip_direction(behavior),
            minutes_since_interaction=state.minutes_since_interaction(self._clock()),
        )

    def _prompt_context(self, snapshot: CompanionSnapshot) -> PromptContext:
        return PromptContext(
            energy=snapshot.energy,
            hunger=snapshot.hunger,
            sleepiness=snapshot.sleepiness,
            emotion=snapshot.emotion.value,
            trust=snapshot.trust,
            intimacy=snapshot.intimacy,
            minutes_since_interaction=snapshot.minutes_since_interaction,
            hour=self._hour_of_day(),
            behavior=snapshot.behavior.value,
        )

    # --- Events ---

    def _emit(self, event: CompanionEvent) -> None:
        if self._events.full():
            dropped = self._events.get_nowait()
            logger.debug("Event queue full, dropped %s event", dropped.kind)
        self._events.put_nowait(event)

    def drain_events(self) -> list[CompanionEvent]:
        """Pop every pending event without waiting."""
        events: list[CompanionEvent] = []
        while not self._events.empty():
            events.append(self._events.get_nowait())
        return events

    async def next_event(self) -> CompanionEvent:
        """Wait for the next event."""
        return await self._events.get()

    async def publish_state(self) -> CompanionSnapshot:
        """Broadcast the current snapshot to the front-end."""
        snapshot = await self.snapshot()
        self._emit(StateUpdateEvent(snapshot=snapshot))
        return snapshot

    # --- Background work ---

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def wait_pending(self) -> None:
        """Wait for all in-flight generation calls to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def close(self) -> None:
        """Cancel in-flight generation calls. No state is touched."""
        for task in list(self._pending):
            task.cancel()
        await self.wait_pending()

    async def _remember(self, kind: str, content: str, weight: float) -> None:
        try:
            await self._store.store(
                MemoryEntry(kind=kind, content=content, weight=weight, timestamp=self._clock())
            )
        except StoreError:
            logger.exception("Failed to record %s memory", kind)

    async def _recent_memories_text(self) -> list[str]:
        try:
            return await self._store.recent_as_text(PROMPT_RECENT_MEMORIES)
        except StoreError:
            logger.exception("Failed to read recent memories")
            return []

    # --- Simulation ---

    async def snapshot(self) -> CompanionSnapshot:
        async with self._lock:
            return self._make_snapshot()

    async def tick(self) -> CompanionSnapshot:
        """Advance the agent by one simulated minute."""
        async with self._lock:
            self._state.tick(self._clock())
            return self._make_snapshot()

    async def state_copy(self) -> AgentState:
        """Detached deep copy of the agent state."""
        async with self._lock:
            return loads_state(dumps_state(self._state))

    # --- Interactions ---

    async def click(self) -> CompanionSnapshot:
        """The owner clicked the agent."""
        async with self._lock:
            self._state.record_interaction(self._clock())
            self._state.relationship.on_positive_interaction()
            snapshot = self._make_snapshot()
        await self._remember("interaction", "owner clicked me", 0.3)
        return snapshot

    async def feed(self) -> CompanionSnapshot:
        """The owner fed the agent."""
        async with self._lock:
            self._state.record_interaction(self._clock())
            self._state.physiological.feed()
            self._state.relationship.on_positive_interaction()
            snapshot = self._make_snapshot()
        await self._remember("interaction", "owner fed me", 0.6)
        return snapshot

    async def speak(self, message: str) -> CompanionSnapshot:
        """The owner said something to the agent.

        The reaction is generated in the background and arrives later as a
        SpeechResponseEvent (plus a ThoughtEvent when there is a thought).
        """
        async with self._lock:
            self._state.record_interaction(self._clock())
            self._state.relationship.on_conversation()
            snapshot = self._make_snapshot()
            context = self._prompt_context(snapshot)

        await self._remember("user_speech", f'owner said: "{message}"', 0.7)
        if self._llm.available:
            memories = await self._recent_memories_text()
            self._spawn(self._react_to_speech(message, context, memories))
        return snapshot

    async def _react_to_speech(
        self, message: str, context: PromptContext, memories: list[str]
    ) -> None:
        messages = build_speech_response_prompt(message, context, memories)
        try:
            text = await self._llm.chat(messages, SPEECH_MAX_TOKENS, SPEECH_TEMPERATURE)
        except LLMError:
            logger.exception("LLM speech reaction failed")
            return
        logger.info("LLM speech response: %s", text)

        result = parse_speech_response(text)
        self._emit(
            SpeechResponseEvent(
                action=result.action,
                thought=result.thought,
                behavior=action_to_behavior(result.action),
            )
        )
        if is_displayable(result.thought):
            self._emit(ThoughtEvent(text=result.thought))

    # --- Thinking ---

    async def think(self) -> ThinkingResult | None:
        """Run one autonomous thinking call.

        Returns:
            The parsed result, or None when generation failed or is disabled.
        """
        if not self._llm.available:
            return None
        async with self._lock:
            context = self._prompt_context(self._make_snapshot())
        memories = await self._recent_memories_text()

        messages = build_thinking_prompt(context, memories)
        try:
            text = await self._llm.chat(
                messages, THINKING_MAX_TOKENS, THINKING_TEMPERATURE
            )
        except LLMError:
            logger.exception("LLM thinking failed")
            return None
        logger.info("Thinking: %s", text)

        result = parse_thinking_response(text)
        await self._remember("thought", result.thinking, 0.5)
        if is_displayable(result.show_thought):
            self._emit(ThoughtEvent(text=result.show_thought))
        return result

    def schedule_thinking(self) -> asyncio.Task | None:
        """Start a thinking call in the background."""
        if not self._llm.available:
            return None
        return self._spawn(self.think())

    async def rule_based_thought(self) -> str | None:
        """Emit a rule-based thought bubble, if the state calls for one."""
        async with self._lock:
            text = self._thoughts.generate(self._state)
        if text:
            self._emit(ThoughtEvent(text=text))
        return text

    # --- Memory log ---

    async def recent_memories(self, limit: int = 10) -> list[MemoryEntry]:
        return await self._store.recent(limit)

    # --- Persistence ---

    async def save(self) -> None:
        """Persist the agent state.

        Raises:
            StoreError: If the durable write fails.
        """
        async with self._lock:
            raw = dumps_state(self._state)
        await self._store.save_snapshot(self._state_key, raw)

    async def load(self) -> bool:
        """Restore the agent state from the store.

        Any failure to read or decode the snapshot falls back to a fresh
        agent; it is never fatal.

        Returns:
            True if a stored snapshot was restored.
        """
        try:
            raw = await self._store.load_snapshot(self._state_key)
        except StoreError:
            logger.warning("Could not read stored state; starting fresh", exc_info=True)
            raw = None

        restored: AgentState | None = None
        if raw is not None:
            try:
                restored = loads_state(raw)
            except (KeyError, TypeError, ValueError, OverflowError):
                logger.warning("Stored state is malformed; starting fresh", exc_info=True)

        async with self._lock:
            if restored is not None:
                self._state = restored
                logger.info("Restored companion state from %r", self._state_key)
            else:
                self._state = AgentState.fresh(self._clock())
        return restored is not None
