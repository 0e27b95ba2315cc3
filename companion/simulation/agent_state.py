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

"""AgentState - the aggregate root of the companion simulation.

Composes the physiological drives, the active emotion and the relationship
affinities, plus sleep/wake and interaction-recency bookkeeping. It is
mutated only by tick() (once per simulated minute) and
record_interaction() (once per user action).

Timestamps are whole Unix seconds. Every operation accepts an optional
`now` so callers and tests can drive the clock explicitly.

AgentState has no internal locking; the owner must serialize access.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from companion.config import (
    FALL_ASLEEP_SLEEPINESS,
    INTERACTION_WINDOW_SECONDS,
    IRRITATED_AFTER_INTERACTIONS,
    NEGLECT_MINUTES,
    WAKE_AFTER_INTERACTIONS,
    WAKE_UP_SLEEPINESS,
)
from companion.models.enums import Emotion
from companion.models.physiology import PhysiologicalState
from companion.models.relationship import RelationshipState

from .emotion_engine import has_recent_interaction, next_emotion


def unix_now() -> int:
    return int(time.time())


@dataclass
class AgentState:
    """Full internal state of the companion.

    Attributes:
        physiological: Energy, hunger and sleepiness.
        emotion: The single active mood.
        relationship: Trust, intimacy and understanding.
        is_sleeping: Whether the agent is asleep.
        last_interaction_at: Unix seconds of the last user action.
        recent_interaction_count: User actions since the counter was reset.
        interaction_count_reset_at: Unix seconds of the last counter reset.
    """

    physiological: PhysiologicalState = field(default_factory=PhysiologicalState)
    emotion: Emotion = Emotion.CALM
    relationship: RelationshipState = field(default_factory=RelationshipState)
    is_sleeping: bool = False
    last_interaction_at: int = field(default_factory=unix_now)
    recent_interaction_count: int = 0
    interaction_count_reset_at: int = field(default_factory=unix_now)

    @classmethod
    def fresh(cls, now: int | None = None) -> AgentState:
        """Create a brand-new agent whose clocks all start at `now`."""
        now = unix_now() if now is None else now
        return cls(last_interaction_at=now, interaction_count_reset_at=now)

    def minutes_since_interaction(self, now: int | None = None) -> int:
        """Whole minutes since the last user action (never negative)."""
        now = unix_now() if now is None else now
        return max(0, now - self.last_interaction_at) // 60

    def tick(self, now: int | None = None) -> None:
        """Advance the agent by one simulated minute.

        Order: reset stale interaction counter -> drives -> sleep/wake ->
        emotion -> neglect. The caller guarantees at most one call per
        simulated minute; a second call double-applies decay.

        Args:
            now: Wall-clock Unix seconds. Defaults to the current time.
        """
        now = unix_now() if now is None else now
        minutes = self.minutes_since_interaction(now)

        if now - self.interaction_count_reset_at > INTERACTION_WINDOW_SECONDS:
            self.recent_interaction_count = 0
            self.interaction_count_reset_at = now

        self.physiological.tick(self.is_sleeping)

        # Edge-triggered: at most one of these fires per tick.
        if not self.is_sleeping and self.physiological.sleepiness > FALL_ASLEEP_SLEEPINESS:
            self.is_sleeping = True
        elif self.is_sleeping and self.physiological.sleepiness < WAKE_UP_SLEEPINESS:
            self.is_sleeping = False

        self.emotion = next_emotion(
            self.emotion,
            has_interaction=has_recent_interaction(minutes),
            minutes_since_interaction=minutes,
            energy=self.physiological.energy,
            intimacy=self.relationship.intimacy,
        )

        if minutes > NEGLECT_MINUTES:
            self.relationship.on_neglect()

    def record_interaction(self, now: int | None = None) -> None:
        """Note a user action.

        Waking a sleeping agent takes a second poke within the window, and
        poking it more than three times makes it irritated. Counter decay
        is left to tick(), so a burst between ticks accumulates.

        Args:
            now: Wall-clock Unix seconds. Defaults to the current time.
        """
        self.last_interaction_at = unix_now() if now is None else now
        self.recent_interaction_count += 1

        if self.is_sleeping:
            if self.recent_interaction_count > IRRITATED_AFTER_INTERACTIONS:
                self.emotion = Emotion.IRRITATED
            if self.recent_interaction_count > WAKE_AFTER_INTERACTIONS:
                self.is_sleeping = False
