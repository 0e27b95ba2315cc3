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

"""Behavior oracle - maps agent state to one observable Behavior.

Decision precedence (first match wins):
  1. asleep                 -> Sleep
  2. sleepiness > 70        -> Sleep
  3. energy < 20            -> Sit
  4. hunger > 85            -> Walk
  5. emotion-driven choice, weighted-random for Bored, Happy, Playful
     and Calm; deterministic for Irritated, Down and Curious.

Randomness comes from an injected source with a `random()` method
returning a uniform float in [0, 1). A numpy Generator is used when none
is given. The threshold placement of every band is fixed; only the
source of draws is replaceable.
"""

from __future__ import annotations

from typing import Protocol

import numpy as np

from companion.config import (
    HAPPY_APPROACH_INTIMACY,
    SIT_BEHAVIOR_ENERGY,
    SLEEP_BEHAVIOR_SLEEPINESS,
    TWILIGHT_HOURS,
    TWILIGHT_WALK_ENERGY,
    WALK_BEHAVIOR_HUNGER,
)
from companion.models.enums import Behavior, Emotion

from .agent_state import AgentState


class RandomSource(Protocol):
    def random(self) -> float: ...


# Cumulative upper bounds for the default day-time distribution.
# Idle appears twice: 35% + 15% = 50% combined.
_DAILY_BANDS: list[tuple[float, Behavior]] = [
    (0.35, Behavior.IDLE),
    (0.55, Behavior.SIT),
    (0.70, Behavior.WALK),
    (0.85, Behavior.ALERT),
    (1.00, Behavior.IDLE),
]

_BORED_BANDS: list[tuple[float, Behavior]] = [
    (0.3, Behavior.WALK),
    (0.5, Behavior.RUN),
    (1.0, Behavior.ALERT),
]


def _pick(bands: list[tuple[float, Behavior]], r: float) -> Behavior:
    for upper, behavior in bands:
        if r < upper:
            return behavior
    return bands[-1][1]


def is_twilight(hour: int) -> bool:
    """Dawn and dusk hours when cats are most active."""
    return any(start <= hour < end for start, end in TWILIGHT_HOURS)


class BehaviorOracle:
    """Chooses the agent's observable behavior from a state snapshot.

    Args:
        rng: Uniform random source. Defaults to numpy's default_rng(seed).
        seed: Seed for the default generator; ignored when rng is given.
    """

    def __init__(self, rng: RandomSource | None = None, seed: int | None = None):
        self._rng = rng if rng is not None else np.random.default_rng(seed)

    def _draw(self) -> float:
        return float(self._rng.random())

    def decide(self, state: AgentState, hour: int) -> Behavior:
        """Decide the current behavior.

        Args:
            state: The agent (not mutated).
            hour: Local hour of day, 0-23.

        Returns:
            The chosen Behavior.
        """
        if state.is_sleeping:
            return Behavior.SLEEP

        phys = state.physiological
        if phys.sleepiness > SLEEP_BEHAVIOR_SLEEPINESS:
            return Behavior.SLEEP
        if phys.energy < SIT_BEHAVIOR_ENERGY:
            return Behavior.SIT
        if phys.hunger > WALK_BEHAVIOR_HUNGER:
            return Behavior.WALK

        emotion = state.emotion
        if emotion is Emotion.BORED:
            return _pick(_BORED_BANDS, self._draw())

        if emotion is Emotion.HAPPY:
            # The same draw is reused across both guards, so the Idle share
            # depends on whether the intimacy guard is active.
            r = self._draw()
            if state.relationship.intimacy > HAPPY_APPROACH_INTIMACY and r < 0.3:
                return Behavior.WALK
            if r < 0.5:
                return Behavior.IDLE
            return Behavior.SIT

        if emotion is Emotion.IRRITATED:
            return Behavior.SIT
        if emotion is Emotion.DOWN:
            return Behavior.SLEEP
        if emotion is Emotion.CURIOUS:
            return Behavior.ALERT

        if emotion is Emotion.PLAYFUL:
            return Behavior.RUN if self._draw() < 0.5 else Behavior.WALK

        # Calm
        if is_twilight(hour) and phys.energy > TWILIGHT_WALK_ENERGY:
            if self._draw() < 0.4:
                return Behavior.WALK
        return _pick(_DAILY_BANDS, self._draw())

    def flip_direction(self, behavior: Behavior) -> bool:
        """Randomly choose a facing flip for actions that allow one."""
        if not behavior.may_change_direction():
            return False
        return self._draw() < 0.5
