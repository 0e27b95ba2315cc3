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

"""Text-generation client (Gemini via google.genai).

Takes a role-tagged message list plus a token/temperature budget and
returns the model's free-form reply. Every failure is raised as LLMError;
callers log it and drop the reactive event.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from companion.config import LLM_TIMEOUT_SECONDS, MODEL_NAME


class LLMError(RuntimeError):
    """Raised when a text-generation request fails or returns nothing."""


@dataclass(frozen=True)
class ChatMessage:
    """One turn of the conversation.

    Attributes:
        role: "system", "user" or "assistant".
        content: Message text.
    """

    role: str
    content: str


class TextGenerationClient:
    """Thin async wrapper around google.genai.

    Args:
        api_key: Gemini API key. When empty the client is unavailable and
            chat() raises LLMError without touching the network.
        model: Model identifier.
        timeout_seconds: Per-request timeout.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = MODEL_NAME,
        timeout_seconds: float = LLM_TIMEOUT_SECONDS,
    ):
        self._api_key = api_key or ""
        self._model = model
        self._timeout_seconds = timeout_seconds
        self._client = None

    @property
    def available(self) -> bool:
        return bool(self._api_key)

    def _get_client(self):
        if self._client is None:
            from google import genai

            self._client = genai.Client(api_key=self._api_key)
        return self._client

    async def chat(
        self,
        messages: list[ChatMessage],
        max_tokens: int,
        temperature: float,
    ) -> str:
        """Send a conversation and return the reply text.

        Args:
            messages: System and user/assistant turns, in order.
            max_tokens: Output token budget.
            temperature: Sampling temperature.

        Returns:
            The reply text (stripped).

        Raises:
            LLMError: On missing key, timeout, transport/API error or empty reply.
        """
        if not self.available:
            raise LLMError("Text generation is not configured (no API key).")

        from google.genai import types

        system_instruction = "\n\n".join(
            m.content for m in messages if m.role == "system"
        )
        contents = [
            types.Content(
                role="model" if m.role == "assistant" else "user",
                parts=[types.Part.from_text(text=m.content)],
            )
            for m in messages
            if m.role != "system"
        ]
        config = types.GenerateContentConfig(
            system_instruction=system_instruction or None,
            max_output_tokens=max_tokens,
            temperature=temperature,
        )

        try:
            response = await asyncio.wait_for(
                self._get_client().aio.models.generate_content(
                    model=self._model,
                    contents=contents,
                    config=config,
                ),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise LLMError(
                f"Text generation timed out after {self._timeout_seconds:.0f}s"
            ) from e
        except Exception as e:
            raise LLMError(f"Text generation request failed: {e}") from e

        text = response.text
        if not text:
            raise LLMError("Text generation returned no content.")
        return text.strip()
