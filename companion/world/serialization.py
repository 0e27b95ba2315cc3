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

"""Serialization helpers for persisting AgentState.

Stored snapshots must be JSON-serializable (no enums or dataclasses).
These functions convert between AgentState and plain dicts. Floats and
integers pass through unchanged, so a round trip through json is exact.
"""

from __future__ import annotations

import json
import math
from typing import Any

from companion.models.enums import Emotion
from companion.models.physiology import PhysiologicalState
from companion.models.relationship import RelationshipState
from companion.simulation.agent_state import AgentState


def _finite(value: Any) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"Non-finite value in snapshot: {value!r}")
    return number


def serialize_state(state: AgentState) -> dict[str, Any]:
    """Convert an AgentState to a JSON-serializable dict.

    Args:
        state: The agent state to serialize.

    Returns:
        Plain dict with the emotion stored by value.
    """
    return {
        "physiological": {
            "energy": state.physiological.energy,
            "hunger": state.physiological.hunger,
            "sleepiness": state.physiological.sleepiness,
        },
        "emotion": state.emotion.value,
        "relationship": {
            "trust": state.relationship.trust,
            "intimacy": state.relationship.intimacy,
            "understanding": state.relationship.understanding,
        },
        "is_sleeping": state.is_sleeping,
        "last_interaction_at": state.last_interaction_at,
        "recent_interaction_count": state.recent_interaction_count,
        "interaction_count_reset_at": state.interaction_count_reset_at,
    }


def deserialize_state(data: dict[str, Any]) -> AgentState:
    """Reconstruct an AgentState from a serialized dict.

    Args:
        data: Dict previously produced by serialize_state.

    Returns:
        Reconstructed AgentState.

    Raises:
        KeyError: If a required field is missing.
        ValueError: If the emotion is unknown or a number is not finite.
        TypeError: If a section has the wrong shape.
    """
    phys = data["physiological"]
    rel = data["relationship"]
    return AgentState(
        physiological=PhysiologicalState(
            energy=_finite(phys["energy"]),
            hunger=_finite(phys["hunger"]),
            sleepiness=_finite(phys["sleepiness"]),
        ),
        emotion=Emotion(data["emotion"]),
        relationship=RelationshipState(
            trust=_finite(rel["trust"]),
            intimacy=_finite(rel["intimacy"]),
            understanding=_finite(rel["understanding"]),
        ),
        is_sleeping=bool(data["is_sleeping"]),
        last_interaction_at=int(_finite(data["last_interaction_at"])),
        recent_interaction_count=int(_finite(data["recent_interaction_count"])),
        interaction_count_reset_at=int(_finite(data["interaction_count_reset_at"])),
    )


def dumps_state(state: AgentState) -> str:
    return json.dumps(serialize_state(state))


def loads_state(raw: str) -> AgentState:
    """Parse a stored JSON snapshot.

    Raises:
        ValueError: On malformed JSON or an unknown emotion.
        KeyError: If a required field is missing.
        TypeError: If the payload has the wrong shape.
    """
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise TypeError(f"Snapshot must be a JSON object, got {type(data).__name__}")
    return deserialize_state(data)
