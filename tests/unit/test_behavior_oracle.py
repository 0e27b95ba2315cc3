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

"""Tests for the behavior oracle and rule-based thoughts."""

import itertools
from collections import Counter

import numpy as np
import pytest

from companion.models.enums import Behavior, Emotion
from companion.models.physiology import PhysiologicalState
from companion.models.relationship import RelationshipState
from companion.simulation.agent_state import AgentState
from companion.simulation.behavior_oracle import BehaviorOracle, is_twilight
from companion.simulation.thought_engine import ThoughtEngine

NOON = 12
DUSK = 18


class StubRandom:
    """Returns a fixed sequence of draws and records how many were used."""

    def __init__(self, *draws: float):
        self._draws = list(draws)
        self.calls = 0

    def random(self) -> float:
        value = self._draws[self.calls]
        self.calls += 1
        return value


def _state(emotion=Emotion.CALM, energy=80.0, hunger=20.0, sleepiness=10.0,
           intimacy=5.0, is_sleeping=False) -> AgentState:
    return AgentState(
        physiological=PhysiologicalState(
            energy=energy, hunger=hunger, sleepiness=sleepiness
        ),
        emotion=emotion,
        relationship=RelationshipState(intimacy=intimacy),
        is_sleeping=is_sleeping,
        last_interaction_at=0,
        interaction_count_reset_at=0,
    )


def _decide(state, *draws, hour=NOON):
    rng = StubRandom(*draws)
    return BehaviorOracle(rng=rng).decide(state, hour), rng.calls


class TestPrecedence:
    def test_sleeping_always_sleeps(self):
        for emotion, hunger, energy in itertools.product(
            Emotion, (0.0, 90.0), (5.0, 90.0)
        ):
            state = _state(emotion, energy=energy, hunger=hunger, is_sleeping=True)
            behavior, calls = _decide(state)
            assert behavior is Behavior.SLEEP
            assert calls == 0

    def test_high_sleepiness_sleeps(self):
        assert _decide(_state(sleepiness=70.1, energy=5.0))[0] is Behavior.SLEEP
        assert _decide(_state(sleepiness=70.0, energy=5.0))[0] is Behavior.SIT

    def test_low_energy_sits(self):
        assert _decide(_state(energy=19.9, hunger=99.0))[0] is Behavior.SIT

    def test_high_hunger_walks(self):
        assert _decide(_state(Emotion.DOWN, hunger=85.1))[0] is Behavior.WALK
        assert _decide(_state(Emotion.DOWN, hunger=85.0))[0] is Behavior.SLEEP


class TestEmotionBranches:
    @pytest.mark.parametrize(
        ("emotion", "expected"),
        [
            (Emotion.IRRITATED, Behavior.SIT),
            (Emotion.DOWN, Behavior.SLEEP),
            (Emotion.CURIOUS, Behavior.ALERT),
        ],
    )
    def test_deterministic_emotions(self, emotion, expected):
        behavior, calls = _decide(_state(emotion))
        assert behavior is expected
        assert calls == 0

    @pytest.mark.parametrize(
        ("draw", "expected"),
        [
            (0.0, Behavior.WALK),
            (0.2999, Behavior.WALK),
            (0.3, Behavior.RUN),
            (0.4999, Behavior.RUN),
            (0.5, Behavior.ALERT),
            (0.9999, Behavior.ALERT),
        ],
    )
    def test_bored_bands(self, draw, expected):
        assert _decide(_state(Emotion.BORED), draw)[0] is expected

    @pytest.mark.parametrize(
        ("draw", "expected"),
        [(0.0, Behavior.RUN), (0.4999, Behavior.RUN), (0.5, Behavior.WALK)],
    )
    def test_playful_bands(self, draw, expected):
        assert _decide(_state(Emotion.PLAYFUL), draw)[0] is expected

    @pytest.mark.parametrize(
        ("intimacy", "draw", "expected"),
        [
            (50.1, 0.29, Behavior.WALK),
            (50.1, 0.3, Behavior.IDLE),
            (50.1, 0.49, Behavior.IDLE),
            (50.1, 0.5, Behavior.SIT),
            (50.0, 0.1, Behavior.IDLE),
            (50.0, 0.49, Behavior.IDLE),
            (50.0, 0.5, Behavior.SIT),
        ],
    )
    def test_happy_bands(self, intimacy, draw, expected):
        behavior, calls = _decide(_state(Emotion.HAPPY, intimacy=intimacy), draw)
        assert behavior is expected
        assert calls == 1, "Happy reuses a single draw across both guards"


class TestCalm:
    @pytest.mark.parametrize(
        ("draw", "expected"),
        [
            (0.0, Behavior.IDLE),
            (0.3499, Behavior.IDLE),
            (0.35, Behavior.SIT),
            (0.55, Behavior.WALK),
            (0.70, Behavior.ALERT),
            (0.85, Behavior.IDLE),
            (0.9999, Behavior.IDLE),
        ],
    )
    def test_daily_bands_at_noon(self, draw, expected):
        behavior, calls = _decide(_state(Emotion.CALM), draw, hour=NOON)
        assert behavior is expected
        assert calls == 1

    def test_twilight_walk(self):
        behavior, calls = _decide(_state(Emotion.CALM, energy=61.0), 0.39, hour=DUSK)
        assert behavior is Behavior.WALK
        assert calls == 1

    def test_twilight_miss_falls_through_to_daily(self):
        behavior, calls = _decide(
            _state(Emotion.CALM, energy=61.0), 0.4, 0.6, hour=DUSK
        )
        assert behavior is Behavior.WALK
        assert calls == 2

    def test_twilight_low_energy_skips_the_walk_draw(self):
        behavior, calls = _decide(_state(Emotion.CALM, energy=60.0), 0.1, hour=6)
        assert behavior is Behavior.IDLE
        assert calls == 1

    @pytest.mark.parametrize(
        ("hour", "expected"),
        [(4, False), (5, True), (7, True), (8, False), (16, False),
         (17, True), (19, True), (20, False)],
    )
    def test_is_twilight(self, hour, expected):
        assert is_twilight(hour) is expected


class TestDirection:
    def test_may_change_direction(self):
        allowed = {b for b in Behavior if b.may_change_direction()}
        assert allowed == {Behavior.WALK, Behavior.RUN}

    def test_flip_only_for_moving_behaviors(self):
        rng = StubRandom(0.1, 0.9)
        oracle = BehaviorOracle(rng=rng)
        assert oracle.flip_direction(Behavior.SIT) is False
        assert rng.calls == 0
        assert oracle.flip_direction(Behavior.WALK) is True
        assert oracle.flip_direction(Behavior.RUN) is False


def test_seeded_generator_is_reproducible():
    state = _state(Emotion.CALM)
    first = BehaviorOracle(seed=42)
    second = BehaviorOracle(seed=42)
    a = [first.decide(state, NOON) for _ in range(50)]
    b = [second.decide(state, NOON) for _ in range(50)]
    assert a == b


def test_calm_distribution_roughly_matches_bands():
    oracle = BehaviorOracle(rng=np.random.default_rng(7))
    state = _state(Emotion.CALM)
    counts = Counter(oracle.decide(state, NOON) for _ in range(20000))
    assert counts[Behavior.IDLE] / 20000 == pytest.approx(0.50, abs=0.02)
    assert counts[Behavior.SIT] / 20000 == pytest.approx(0.20, abs=0.02)
    assert counts[Behavior.WALK] / 20000 == pytest.approx(0.15, abs=0.02)
    assert counts[Behavior.ALERT] / 20000 == pytest.approx(0.15, abs=0.02)


class TestThoughtEngine:
    def test_needs_override_mood(self):
        engine = ThoughtEngine(rng=StubRandom())
        assert engine.generate(_state(Emotion.HAPPY, hunger=80.1)) == "hungry..."
        assert engine.generate(_state(Emotion.HAPPY, sleepiness=75.1)) == "sleepy..."

    def test_sleeping_snores_sometimes(self):
        assert ThoughtEngine(rng=StubRandom(0.1)).generate(
            _state(is_sleeping=True)
        ) == "zzz"
        assert ThoughtEngine(rng=StubRandom(0.2)).generate(
            _state(is_sleeping=True)
        ) is None

    @pytest.mark.parametrize(
        ("emotion", "draw", "expected"),
        [
            (Emotion.HAPPY, 0.1, "mm~"),
            (Emotion.HAPPY, 0.3, "cozy"),
            (Emotion.HAPPY, 0.5, None),
            (Emotion.BORED, 0.3, "..."),
            (Emotion.IRRITATED, 0.19, "ugh"),
            (Emotion.DOWN, 0.2, None),
            (Emotion.CURIOUS, 0.29, "hm?"),
            (Emotion.PLAYFUL, 0.0, "play!"),
            (Emotion.CALM, 0.12, "warm"),
        ],
    )
    def test_emotion_thoughts(self, emotion, draw, expected):
        engine = ThoughtEngine(rng=StubRandom(draw))
        assert engine.generate(_state(emotion)) == expected
