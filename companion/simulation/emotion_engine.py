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

"""Emotion engine - the mood state machine.

The agent has exactly one active Emotion. Each tick the next mood is a
pure function of the current mood and four signals:

  has_interaction            minutes_since_interaction < 2
  minutes_since_interaction  whole minutes since the last user action
  energy                     current physiological energy
  intimacy                   current relationship intimacy

Transition table (first matching guard wins, otherwise stay):

  Calm       interaction and energy > 50 -> Happy; silence > 120 -> Bored
  Happy      silence > 60 -> Calm
  Bored      interaction -> Happy; silence > 240 -> Irritated if
             intimacy > 40 else Down
  Irritated  silence > 30 and no interaction -> Calm
  Down       interaction and intimacy > 30 -> Calm
  Curious    silence > 10 -> Calm
  Playful    energy < 40 -> Calm; silence > 30 -> Bored
"""

from __future__ import annotations

from companion.config import RECENT_INTERACTION_MINUTES
from companion.models.enums import Emotion


def has_recent_interaction(minutes_since_interaction: int) -> bool:
    return minutes_since_interaction < RECENT_INTERACTION_MINUTES


def next_emotion(
    current: Emotion,
    has_interaction: bool,
    minutes_since_interaction: int,
    energy: float,
    intimacy: float,
) -> Emotion:
    """Compute the mood for the next tick.

    Args:
        current: The active mood.
        has_interaction: Whether the owner interacted within the last
            two minutes.
        minutes_since_interaction: Whole minutes since the last interaction.
        energy: Physiological energy after this tick's update.
        intimacy: Relationship intimacy.

    Returns:
        The next mood. Always one of the seven Emotion members.
    """
    minutes = minutes_since_interaction

    if current is Emotion.CALM:
        if has_interaction and energy > 50.0:
            return Emotion.HAPPY
        if minutes > 120:
            return Emotion.BORED
        return Emotion.CALM

    if current is Emotion.HAPPY:
        return Emotion.CALM if minutes > 60 else Emotion.HAPPY

    if current is Emotion.BORED:
        if has_interaction:
            return Emotion.HAPPY
        if minutes > 240:
            return Emotion.IRRITATED if intimacy > 40.0 else Emotion.DOWN
        return Emotion.BORED

    if current is Emotion.IRRITATED:
        if minutes > 30 and not has_interaction:
            return Emotion.CALM
        return Emotion.IRRITATED

    if current is Emotion.DOWN:
        if has_interaction and intimacy > 30.0:
            return Emotion.CALM
        return Emotion.DOWN

    if current is Emotion.CURIOUS:
        return Emotion.CALM if minutes > 10 else Emotion.CURIOUS

    if current is Emotion.PLAYFUL:
        if energy < 40.0:
            return Emotion.CALM
        if minutes > 30:
            return Emotion.BORED
        return Emotion.PLAYFUL

    raise ValueError(f"Unknown emotion: {current!r}")
