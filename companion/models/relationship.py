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

"""Relationship affinities between the agent and its owner.

Affinities are floats in [0, 100]:
  trust          - steady company raises it, long absences lower it.
  intimacy       - quality interaction raises it, neglect lowers it.
  understanding  - conversation raises it; nothing ever lowers it.

The trust thresholds expose cat-like body-language milestones to the
front-end. They are read-only and never change state.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from companion.config import (
    APPROACH_TRUST,
    CONVERSATION_INTIMACY_GAIN,
    CONVERSATION_UNDERSTANDING_GAIN,
    DEFAULT_INTIMACY,
    DEFAULT_TRUST,
    DEFAULT_UNDERSTANDING,
    NEGLECT_INTIMACY_LOSS,
    NEGLECT_TRUST_LOSS,
    POSITIVE_INTIMACY_GAIN,
    POSITIVE_TRUST_GAIN,
    SHOW_BELLY_TRUST,
    SLOW_BLINK_TRUST,
)


def _clamp(value: float) -> float:
    return float(np.clip(value, 0.0, 100.0))


@dataclass
class RelationshipState:
    """The agent's bond with its owner."""

    trust: float = DEFAULT_TRUST
    intimacy: float = DEFAULT_INTIMACY
    understanding: float = DEFAULT_UNDERSTANDING

    def __post_init__(self) -> None:
        self.trust = _clamp(self.trust)
        self.intimacy = _clamp(self.intimacy)
        self.understanding = _clamp(self.understanding)

    def on_positive_interaction(self) -> None:
        """A click, pat or meal from the owner."""
        self.trust = _clamp(self.trust + POSITIVE_TRUST_GAIN)
        self.intimacy = _clamp(self.intimacy + POSITIVE_INTIMACY_GAIN)

    def on_conversation(self) -> None:
        """The owner talked to the agent."""
        self.understanding = _clamp(
            self.understanding + CONVERSATION_UNDERSTANDING_GAIN
        )
        self.intimacy = _clamp(self.intimacy + CONVERSATION_INTIMACY_GAIN)

    def on_neglect(self) -> None:
        """Applied once per tick while the owner stays away too long."""
        self.trust = _clamp(self.trust - NEGLECT_TRUST_LOSS)
        self.intimacy = _clamp(self.intimacy - NEGLECT_INTIMACY_LOSS)

    def will_approach(self) -> bool:
        return self.trust > APPROACH_TRUST

    def will_slow_blink(self) -> bool:
        return self.trust > SLOW_BLINK_TRUST

    def will_show_belly(self) -> bool:
        return self.trust > SHOW_BELLY_TRUST
