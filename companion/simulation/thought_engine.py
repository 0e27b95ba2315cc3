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

"""Rule-based thought bubbles (no LLM).

Short, cat-like thoughts chosen from the agent's needs and mood. Used as
the always-available fallback next to LLM-driven thinking. Most calls
produce nothing; silence is a valid answer.
"""

from __future__ import annotations

import numpy as np

from companion.models.enums import Emotion

from .agent_state import AgentState
from .behavior_oracle import RandomSource

# Per-emotion cumulative bands: (upper bound, thought). Draws past the
# last bound produce no thought.
_EMOTION_THOUGHTS: dict[Emotion, list[tuple[float, str]]] = {
    Emotion.HAPPY: [(0.20, "mm~"), (0.35, "cozy")],
    Emotion.BORED: [(0.25, "bored"), (0.40, "...")],
    Emotion.IRRITATED: [(0.20, "ugh")],
    Emotion.DOWN: [(0.15, "...")],
    Emotion.CURIOUS: [(0.30, "hm?")],
    Emotion.PLAYFUL: [(0.25, "play!")],
    Emotion.CALM: [(0.10, "mm."), (0.15, "warm")],
}

HUNGRY_THOUGHT_HUNGER = 80.0
SLEEPY_THOUGHT_SLEEPINESS = 75.0
SNORE_CHANCE = 0.2


class ThoughtEngine:
    """Produces an occasional thought from state alone.

    Args:
        rng: Uniform random source. Defaults to numpy's default_rng(seed).
        seed: Seed for the default generator; ignored when rng is given.
    """

    def __init__(self, rng: RandomSource | None = None, seed: int | None = None):
        self._rng = rng if rng is not None else np.random.default_rng(seed)

    def generate(self, state: AgentState) -> str | None:
        """Return a thought for the current state, or None for silence."""
        phys = state.physiological
        if phys.hunger > HUNGRY_THOUGHT_HUNGER:
            return "hungry..."
        if phys.sleepiness > SLEEPY_THOUGHT_SLEEPINESS and not state.is_sleeping:
            return "sleepy..."
        if state.is_sleeping:
            return "zzz" if float(self._rng.random()) < SNORE_CHANCE else None

        r = float(self._rng.random())
        for upper, text in _EMOTION_THOUGHTS[state.emotion]:
            if r < upper:
                return text
        return None
