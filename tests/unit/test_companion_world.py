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

"""Tests for CompanionWorld: interactions, events, thinking and persistence."""

from __future__ import annotations

import asyncio
import json

import pytest

from companion.config import STATE_KEY
from companion.llm.client import LLMError
from companion.memory.base import StoreError
from companion.memory.in_memory_store import InMemoryStore
from companion.models.enums import Behavior, Emotion
from companion.models.events import SpeechResponseEvent, StateUpdateEvent, ThoughtEvent
from companion.models.physiology import PhysiologicalState
from companion.simulation.agent_state import AgentState
from companion.simulation.behavior_oracle import BehaviorOracle
from companion.simulation.thought_engine import ThoughtEngine
from companion.world.companion_world import CompanionWorld
from companion.world.serialization import serialize_state

T0 = 1_700_000_000


class FakeLLM:
    """Stands in for TextGenerationClient."""

    def __init__(self, reply: str = "", available: bool = True, error: bool = False,
                 delay: float = 0.0):
        self.reply = reply
        self.available = available
        self.error = error
        self.delay = delay
        self.calls: list[tuple[list, int, float]] = []

    async def chat(self, messages, max_tokens, temperature):
        self.calls.append((messages, max_tokens, temperature))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise LLMError("service unavailable")
        return self.reply


class BrokenStore(InMemoryStore):
    """A store whose every operation fails."""

    async def store(self, entry):
        raise StoreError("disk full")

    async def recent(self, limit=10):
        raise StoreError("disk full")

    async def save_snapshot(self, key, value):
        raise StoreError("disk full")

    async def load_snapshot(self, key):
        raise StoreError("disk full")


class Clock:
    def __init__(self, now: int = T0):
        self.now = now

    def __call__(self) -> int:
        return self.now


def _world(llm=None, store=None, state=None, clock=None, **kwargs) -> CompanionWorld:
    return CompanionWorld(
        store=store if store is not None else InMemoryStore(),
        llm=llm if llm is not None else FakeLLM(available=False),
        state=state,
        oracle=BehaviorOracle(seed=1),
        thoughts=ThoughtEngine(seed=1),
        clock=clock if clock is not None else Clock(),
        hour_of_day=lambda: 12,
        **kwargs,
    )


class TestInteractions:
    @pytest.mark.asyncio
    async def test_click(self):
        world = _world()
        snapshot = await world.click()
        assert snapshot.trust == pytest.approx(10.5)
        assert snapshot.intimacy == pytest.approx(5.8)
        assert snapshot.minutes_since_interaction == 0

        [entry] = await world.recent_memories()
        assert entry.kind == "interaction"
        assert entry.content == "owner clicked me"
        assert entry.weight == pytest.approx(0.3)
        assert entry.timestamp == T0

    @pytest.mark.asyncio
    async def test_feed(self):
        world = _world()
        snapshot = await world.feed()
        assert snapshot.hunger == pytest.approx(0.0)
        assert snapshot.trust == pytest.approx(10.5)
        [entry] = await world.recent_memories()
        assert entry.content == "owner fed me"
        assert entry.weight == pytest.approx(0.6)

    @pytest.mark.asyncio
    async def test_speak_without_llm_only_logs(self):
        world = _world()
        snapshot = await world.speak("hello")
        assert snapshot.understanding == pytest.approx(1.0)
        assert snapshot.intimacy == pytest.approx(5.3)
        assert world.pending_tasks == 0
        assert world.drain_events() == []

        [entry] = await world.recent_memories()
        assert entry.kind == "user_speech"
        assert entry.content == 'owner said: "hello"'
        assert entry.weight == pytest.approx(0.7)

    @pytest.mark.asyncio
    async def test_click_wakes_a_sleeping_agent_on_second_call(self):
        state = AgentState.fresh(now=T0)
        state.is_sleeping = True
        world = _world(state=state)
        assert (await world.click()).is_sleeping is True
        snapshot = await world.click()
        assert snapshot.is_sleeping is False
        assert snapshot.behavior is not Behavior.SLEEP

    @pytest.mark.asyncio
    async def test_store_failure_does_not_block_interaction(self):
        world = _world(store=BrokenStore())
        snapshot = await world.click()
        assert snapshot.trust == pytest.approx(10.5)

    @pytest.mark.asyncio
    async def test_tick_advances_one_minute(self):
        world = _world()
        snapshot = await world.tick()
        assert snapshot.energy == pytest.approx(79.5)
        assert snapshot.hunger == pytest.approx(20.3)
        assert snapshot.sleepiness == pytest.approx(10.2)


class TestSpeechReaction:
    @pytest.mark.asyncio
    async def test_reaction_emits_events(self):
        llm = FakeLLM(reply='```json\n{"action": "approach", "thought": "here."}\n```')
        world = _world(llm=llm)
        await world.click()
        await world.speak("come here")
        await world.wait_pending()

        events = world.drain_events()
        assert events == [
            SpeechResponseEvent(action="approach", thought="here.", behavior=Behavior.WALK),
            ThoughtEvent(text="here."),
        ]
        messages, max_tokens, _ = llm.calls[0]
        assert max_tokens == 200
        assert 'Owner said: "come here"' in messages[1].content
        assert "[interaction] owner clicked me" in messages[1].content

    @pytest.mark.asyncio
    async def test_null_thought_is_not_shown(self):
        llm = FakeLLM(reply='{"action": "ignore", "thought": "null"}')
        world = _world(llm=llm)
        await world.speak("hey")
        await world.wait_pending()
        [event] = world.drain_events()
        assert event.kind == "speech_response"
        assert event.behavior is Behavior.IDLE

    @pytest.mark.asyncio
    async def test_unparseable_reply_glances(self):
        world = _world(llm=FakeLLM(reply="*stares*"))
        await world.speak("hey")
        await world.wait_pending()
        [event] = world.drain_events()
        assert event.action == "glance"
        assert event.behavior is Behavior.ALERT

    @pytest.mark.asyncio
    async def test_llm_failure_drops_the_reaction(self):
        world = _world(llm=FakeLLM(error=True))
        snapshot = await world.speak("hey")
        await world.wait_pending()
        assert world.drain_events() == []
        assert snapshot.understanding == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_close_cancels_pending_reaction(self):
        world = _world(llm=FakeLLM(reply='{"action": "sit"}', delay=5.0))
        await world.speak("hey")
        assert world.pending_tasks == 1
        await world.close()
        assert world.pending_tasks == 0
        assert world.drain_events() == []


class TestThinking:
    @pytest.mark.asyncio
    async def test_think_records_and_shows_thought(self):
        llm = FakeLLM(
            reply='{"thinking": "the window is warm", "emotion_change": "unchanged",'
            ' "want_to_do": "nap", "show_thought": "warm"}'
        )
        world = _world(llm=llm)
        result = await world.think()
        assert result.want_to_do == "nap"
        assert world.drain_events() == [ThoughtEvent(text="warm")]
        [entry] = await world.recent_memories()
        assert entry.kind == "thought"
        assert entry.content == "the window is warm"
        assert entry.weight == pytest.approx(0.5)
        _, max_tokens, temperature = llm.calls[0]
        assert max_tokens == 300
        assert temperature == pytest.approx(0.9)
        assert "Recent memories:\nnone" in llm.calls[0][0][1].content

    @pytest.mark.asyncio
    async def test_think_with_garbage_uses_default(self):
        world = _world(llm=FakeLLM(reply="purr"))
        result = await world.think()
        assert result.thinking == "..."
        assert world.drain_events() == []

    @pytest.mark.asyncio
    async def test_think_disabled_or_failing_returns_none(self):
        assert await _world().think() is None
        assert _world().schedule_thinking() is None
        assert await _world(llm=FakeLLM(error=True)).think() is None

    def test_llm_available_follows_client(self):
        assert _world().llm_available is False
        assert _world(llm=FakeLLM()).llm_available is True

    @pytest.mark.asyncio
    async def test_schedule_thinking_runs_in_background(self):
        world = _world(
            llm=FakeLLM(reply='{"thinking": "hm", "emotion_change": "unchanged"}')
        )
        task = world.schedule_thinking()
        assert task is not None
        await world.wait_pending()
        assert task.result().thinking == "hm"

    @pytest.mark.asyncio
    async def test_rule_based_thought(self):
        state = AgentState.fresh(now=T0)
        state.physiological = PhysiologicalState(hunger=90.0)
        world = _world(state=state)
        assert await world.rule_based_thought() == "hungry..."
        assert world.drain_events() == [ThoughtEvent(text="hungry...")]


class TestEvents:
    @pytest.mark.asyncio
    async def test_publish_state(self):
        world = _world()
        snapshot = await world.publish_state()
        assert world.drain_events() == [StateUpdateEvent(snapshot=snapshot)]
        assert world.drain_events() == []

    @pytest.mark.asyncio
    async def test_full_queue_drops_oldest(self):
        state = AgentState.fresh(now=T0)
        state.physiological = PhysiologicalState(hunger=90.0)
        world = _world(state=state, max_pending_events=3)
        for _ in range(3):
            await world.rule_based_thought()
        await world.publish_state()
        kinds = [e.kind for e in world.drain_events()]
        assert kinds == ["thought", "thought", "state_update"]

    @pytest.mark.asyncio
    async def test_next_event_waits(self):
        world = _world()
        waiter = asyncio.create_task(world.next_event())
        await asyncio.sleep(0)
        assert not waiter.done()
        await world.rule_based_thought()
        await world.publish_state()
        event = await asyncio.wait_for(waiter, timeout=1.0)
        assert event.kind in ("thought", "state_update")


class TestPersistence:
    @pytest.mark.asyncio
    async def test_save_and_load_round_trip(self):
        store = InMemoryStore()
        world = _world(store=store)
        await world.feed()
        for _ in range(5):
            await world.tick()
        await world.save()
        saved = await world.state_copy()

        restored = _world(store=store)
        assert await restored.load() is True
        assert await restored.state_copy() == saved

    @pytest.mark.asyncio
    async def test_load_without_snapshot_starts_fresh(self):
        clock = Clock(T0 + 500)
        world = _world(clock=clock)
        await world.click()
        assert await world.load() is False
        state = await world.state_copy()
        assert state == AgentState.fresh(now=T0 + 500)

    @pytest.mark.asyncio
    async def test_malformed_snapshot_starts_fresh(self):
        store = InMemoryStore()
        await store.save_snapshot(STATE_KEY, '{"emotion": "calm"}')
        world = _world(store=store)
        assert await world.load() is False
        assert (await world.state_copy()).emotion is Emotion.CALM

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("section", "field", "value"),
        [
            (None, "last_interaction_at", float("inf")),
            (None, "interaction_count_reset_at", float("-inf")),
            (None, "recent_interaction_count", float("nan")),
            (None, "last_interaction_at", 10**400),
            ("physiological", "energy", float("nan")),
            ("physiological", "hunger", float("inf")),
            ("relationship", "trust", float("nan")),
        ],
    )
    async def test_non_finite_snapshot_starts_fresh(self, section, field, value):
        data = serialize_state(AgentState.fresh(now=T0))
        target = data if section is None else data[section]
        target[field] = value
        store = InMemoryStore()
        await store.save_snapshot(STATE_KEY, json.dumps(data))

        world = _world(store=store)
        assert await world.load() is False
        assert await world.state_copy() == AgentState.fresh(now=T0)

        snapshot = await world.tick()
        for drive in (snapshot.energy, snapshot.hunger, snapshot.sleepiness,
                      snapshot.trust, snapshot.intimacy, snapshot.understanding):
            assert 0.0 <= drive <= 100.0

    @pytest.mark.asyncio
    async def test_unreadable_store_starts_fresh(self):
        world = _world(store=BrokenStore())
        assert await world.load() is False

    @pytest.mark.asyncio
    async def test_save_failure_propagates(self):
        world = _world(store=BrokenStore())
        with pytest.raises(StoreError):
            await world.save()

    @pytest.mark.asyncio
    async def test_state_copy_is_detached(self):
        world = _world()
        copy = await world.state_copy()
        copy.physiological.energy = 1.0
        assert (await world.snapshot()).energy == pytest.approx(80.0)
