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

"""Values handed to the behavior consumer (renderer / UI).

A CompanionSnapshot is taken under the world lock and is immutable
afterwards. Events travel from the world to the consumer through a queue.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, ClassVar

from .enums import Behavior, Emotion


@dataclass(frozen=True)
class CompanionSnapshot:
    """Everything the front-end needs for one reporting cycle.

    Attributes:
        flip_direction: Random facing flip; only ever True for actions
            where Behavior.may_change_direction() holds.
        minutes_since_interaction: Whole minutes since the last user action.
    """

    energy: float
    hunger: float
    sleepiness: float
    emotion: Emotion
    trust: float
    intimacy: float
    understanding: float
    is_sleeping: bool
    behavior: Behavior
    flip_direction: bool
    minutes_since_interaction: int

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["emotion"] = self.emotion.value
        data["behavior"] = self.behavior.value
        return data


@dataclass(frozen=True)
class StateUpdateEvent:
    """Periodic state broadcast."""

    kind: ClassVar[str] = "state_update"

    snapshot: CompanionSnapshot

    def to_dict(self) -> dict[str, Any]:
        return {"snapshot": self.snapshot.to_dict()}


@dataclass(frozen=True)
class ThoughtEvent:
    """A short thought bubble to show above the agent."""

    kind: ClassVar[str] = "thought"

    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text}


@dataclass(frozen=True)
class SpeechResponseEvent:
    """The agent's reaction to something the owner said."""

    kind: ClassVar[str] = "speech_response"

    action: str
    thought: str | None
    behavior: Behavior

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action,
            "thought": self.thought,
            "behavior": self.behavior.value,
        }


CompanionEvent = StateUpdateEvent | ThoughtEvent | SpeechResponseEvent
