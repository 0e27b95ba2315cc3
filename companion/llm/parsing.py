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

"""Tolerant parsing of text-generation replies.

Models are asked for bare JSON but often wrap it in a markdown fence.
Parsing tries the raw text, then the text with the fence stripped, then
gives up and returns a neutral default. It never raises.
"""

from __future__ import annotations

from typing import TypeVar

from pydantic import BaseModel, ValidationError

from companion.models.enums import Behavior


class ThinkingResult(BaseModel):
    """Reply shape of the autonomous thinking call."""

    thinking: str
    emotion_change: str
    want_to_do: str | None = None
    show_thought: str | None = None


class SpeechResult(BaseModel):
    """Reply shape of the speech-reaction call."""

    action: str
    thought: str | None = None
    emotion_change: str | None = None


DEFAULT_THINKING = ThinkingResult(thinking="...", emotion_change="unchanged")
DEFAULT_SPEECH = SpeechResult(action="glance")

# LLM action vocabulary -> renderer behavior. Unknown actions idle.
_ACTION_BEHAVIORS: dict[str, Behavior] = {
    "ignore": Behavior.IDLE,
    "glance": Behavior.ALERT,
    "alert": Behavior.ALERT,
    "approach": Behavior.WALK,
    "walk": Behavior.WALK,
    "walk_away": Behavior.RUN,
    "run": Behavior.RUN,
    "sit": Behavior.SIT,
    "sleep": Behavior.SLEEP,
}

_ModelT = TypeVar("_ModelT", bound=BaseModel)


def strip_code_fence(text: str) -> str:
    """Remove a ```json ... ``` (or bare ```) wrapper."""
    cleaned = text.strip()
    cleaned = cleaned.removeprefix("```json").removeprefix("```")
    cleaned = cleaned.removesuffix("```")
    return cleaned.strip()


def _parse(model: type[_ModelT], text: str) -> _ModelT | None:
    for candidate in (text, strip_code_fence(text)):
        try:
            return model.model_validate_json(candidate)
        except ValidationError:
            continue
    return None


def parse_thinking_response(text: str) -> ThinkingResult:
    result = _parse(ThinkingResult, text)
    return result if result is not None else DEFAULT_THINKING.model_copy()


def parse_speech_response(text: str) -> SpeechResult:
    result = _parse(SpeechResult, text)
    return result if result is not None else DEFAULT_SPEECH.model_copy()


def action_to_behavior(action: str) -> Behavior:
    return _ACTION_BEHAVIORS.get(action.strip().lower(), Behavior.IDLE)


def is_displayable(thought: str | None) -> bool:
    """Whether a thought should be shown as a bubble.

    Models sometimes return the literal string "null" instead of null.
    """
    return bool(thought) and thought.strip() not in ("", "null")
