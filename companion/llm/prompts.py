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

"""Prompt construction for the companion's persona.

Two calls are made to the text-generation service:
  - thinking: periodic inner monologue from the agent's current state.
  - speech reaction: how the agent reacts when the owner talks to it.

Both ask for a bare JSON object; parsing.py handles replies that ignore
that instruction.
"""

from __future__ import annotations

from dataclasses import dataclass

from companion.config import COMPANION_NAME

from .client import ChatMessage

_PERSONA_INSTRUCTION = """\
You are {name}, a digital cat living on your owner's desktop.

What you are:
- A cat, with a cat's instincts, needs and logic.
- You have your own inner world; it does not revolve around your owner.
- You share a faint bond with your owner, but you are still a cat.

What you are not:
- Not an assistant. You do not answer questions.
- Not a servant. You do not fulfil requests.
- Not a toy. You do not cooperate unconditionally.

How you express yourself:
- Extremely brief. Thoughts are 1-10 words.
- Silence is allowed; not reacting is a reaction.
- Self-centred: your world is centred on you.
- Occasional warmth, but it has to be earned.

How you think:
- Sleepy means sleep, whatever the owner is doing.
- Hungry means you say so, but you never "ask".
- Bored means you find something to do, maybe with the owner, maybe alone.
- Disturbed too much means you get annoyed, leave, or go cold.
- When you like your owner you come closer, but never say "I love you".

Good thoughts: "hungry" "sleepy..." "mm." "bird outside" "here." "...still up?" "no." "bored" "warm"
Never like this: "What a lovely day!" "How can I help you?" "So happy to see you!" "You work so hard"
"""

_THINKING_TEMPLATE = """\
Current state:
- Energy: {energy:.0f}/100
- Hunger: {hunger:.0f}/100
- Sleepiness: {sleepiness:.0f}/100
- Mood: {emotion}
- Bond with owner: intimacy {intimacy:.0f}, trust {trust:.0f}
- Minutes since the owner last interacted: {minutes}
- It is {hour}:00

Recent memories:
{memories}

As {name}, what are you thinking right now? What do you want to do?

Reply with JSON only (no markdown code block):
{{"thinking": "your inner thought (1-2 sentences)", "emotion_change": "unchanged / becomes <mood>", "want_to_do": "what you want to do, or null", "show_thought": "a thought to show the owner, or null (max 10 words)"}}"""

_SPEECH_TEMPLATE = """\
Your owner just said something to you.

Owner said: "{message}"

Current state:
- Your mood: {emotion}
- Intimacy: {intimacy:.0f}
- Trust: {trust:.0f}
- You are currently: {behavior}

Recent memories:
{memories}

As a cat, how do you react?

Reply with JSON only (no markdown code block):
{{"action": "one of ignore/glance/approach/walk_away/sit/sleep", "thought": "thought bubble or null (max 10 words)", "emotion_change": "mood change or null"}}"""


@dataclass(frozen=True)
class PromptContext:
    """Immutable copy of the state fields a prompt needs.

    Taken under the world lock so the request can run without it.
    """

    energy: float
    hunger: float
    sleepiness: float
    emotion: str
    trust: float
    intimacy: float
    minutes_since_interaction: int
    hour: int
    behavior: str


def _format_memories(recent_memories: list[str]) -> str:
    return "\n".join(recent_memories) if recent_memories else "none"


def persona_prompt(name: str = COMPANION_NAME) -> str:
    return _PERSONA_INSTRUCTION.format(name=name)


def build_thinking_prompt(
    context: PromptContext,
    recent_memories: list[str],
    name: str = COMPANION_NAME,
) -> list[ChatMessage]:
    """Build the messages for an autonomous thinking call.

    Args:
        context: State snapshot.
        recent_memories: Up to five "[kind] content" lines, newest first.
        name: The companion's name.

    Returns:
        System persona followed by one user turn.
    """
    user_content = _THINKING_TEMPLATE.format(
        energy=context.energy,
        hunger=context.hunger,
        sleepiness=context.sleepiness,
        emotion=context.emotion,
        intimacy=context.intimacy,
        trust=context.trust,
        minutes=context.minutes_since_interaction,
        hour=context.hour,
        memories=_format_memories(recent_memories),
        name=name,
    )
    return [
        ChatMessage(role="system", content=persona_prompt(name)),
        ChatMessage(role="user", content=user_content),
    ]


def build_speech_response_prompt(
    user_message: str,
    context: PromptContext,
    recent_memories: list[str],
    name: str = COMPANION_NAME,
) -> list[ChatMessage]:
    """Build the messages for a speech-reaction call.

    Args:
        user_message: What the owner said.
        context: State snapshot.
        recent_memories: Up to five "[kind] content" lines, newest first.
        name: The companion's name.

    Returns:
        System persona followed by one user turn.
    """
    user_content = _SPEECH_TEMPLATE.format(
        message=user_message,
        emotion=context.emotion,
        intimacy=context.intimacy,
        trust=context.trust,
        behavior=context.behavior,
        memories=_format_memories(recent_memories),
    )
    return [
        ChatMessage(role="system", content=persona_prompt(name)),
        ChatMessage(role="user", content=user_content),
    ]
