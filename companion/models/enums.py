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

"""Emotion and behavior enumerations."""

from __future__ import annotations

import enum


class Emotion(enum.Enum):
    """The single active mood of the agent."""

    HAPPY = "happy"  # After company, food or play
    CALM = "calm"  # Default resting mood
    CURIOUS = "curious"  # Something interesting caught its eye
    PLAYFUL = "playful"  # High energy, wants to play
    BORED = "bored"  # Nobody has been around for a while
    IRRITATED = "irritated"  # Disturbed too often
    DOWN = "down"  # Neglected for a long time


class Behavior(enum.Enum):
    """Externally observable action, mapped 1:1 to front-end animations."""

    IDLE = "idle"
    SLEEP = "sleep"
    WALK = "walk"
    ALERT = "alert"
    SIT = "sit"
    RUN = "run"

    def may_change_direction(self) -> bool:
        """Whether the renderer may randomly flip the facing for this action."""
        return self in (Behavior.WALK, Behavior.RUN)
