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

"""Physiological drives: energy, hunger and sleepiness.

Every drive is a float in [0, 100]. Sleeping restores energy and clears
sleepiness; staying awake does the opposite. Hunger grows every tick
regardless and only drops when the agent is fed.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from companion.config import (
    AWAKE_ENERGY_COST,
    AWAKE_SLEEPINESS_GAIN,
    DEFAULT_ENERGY,
    DEFAULT_HUNGER,
    DEFAULT_SLEEPINESS,
    FEED_HUNGER_DROP,
    HUNGER_PER_TICK,
    HUNGRY_THRESHOLD,
    NEEDS_REST_ENERGY,
    NEEDS_REST_SLEEPINESS,
    SLEEP_ENERGY_GAIN,
    SLEEP_SLEEPINESS_DROP,
)

DRIVE_MIN = 0.0
DRIVE_MAX = 100.0


def _clamp(value: float) -> float:
    return float(np.clip(value, DRIVE_MIN, DRIVE_MAX))


@dataclass
class PhysiologicalState:
    """Bodily needs of the agent.

    Attributes:
        energy: Spent while awake, restored by sleep.
        hunger: Grows with time, reduced by feeding.
        sleepiness: Grows while awake, cleared by sleep.
    """

    energy: float = DEFAULT_ENERGY
    hunger: float = DEFAULT_HUNGER
    sleepiness: float = DEFAULT_SLEEPINESS

    def __post_init__(self) -> None:
        self.energy = _clamp(self.energy)
        self.hunger = _clamp(self.hunger)
        self.sleepiness = _clamp(self.sleepiness)

    def tick(self, is_sleeping: bool) -> None:
        """Advance the drives by one simulated minute.

        Args:
            is_sleeping: Whether the agent is asleep during this minute.
        """
        if is_sleeping:
            self.energy = _clamp(self.energy + SLEEP_ENERGY_GAIN)
            self.sleepiness = _clamp(self.sleepiness - SLEEP_SLEEPINESS_DROP)
        else:
            self.energy = _clamp(self.energy - AWAKE_ENERGY_COST)
            self.sleepiness = _clamp(self.sleepiness + AWAKE_SLEEPINESS_GAIN)
        self.hunger = _clamp(self.hunger + HUNGER_PER_TICK)

    def feed(self) -> None:
        """Reduce hunger after a meal."""
        self.hunger = _clamp(self.hunger - FEED_HUNGER_DROP)

    def needs_rest(self) -> bool:
        return self.energy < NEEDS_REST_ENERGY or self.sleepiness > NEEDS_REST_SLEEPINESS

    def is_hungry(self) -> bool:
        return self.hunger > HUNGRY_THRESHOLD
