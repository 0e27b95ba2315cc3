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

"""Pydantic request/response schemas for the companion API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class StateResponse(BaseModel):
    """One reporting snapshot for the renderer."""

    energy: float
    hunger: float
    sleepiness: float
    emotion: str
    trust: float
    intimacy: float
    understanding: float
    is_sleeping: bool
    behavior: str
    flip_direction: bool
    minutes_since_interaction: int


class SpeakRequest(BaseModel):
    """Something the owner says to the companion."""

    message: str = Field(min_length=1, max_length=500)


class MemoryResponse(BaseModel):
    """A single interaction/thought log record."""

    memory_id: int | None
    kind: str
    content: str
    weight: float
    timestamp: int


class EventResponse(BaseModel):
    """A pending front-end event."""

    kind: str
    data: dict[str, Any]


class TickRunnerStatusResponse(BaseModel):
    """Response with background tick runner status."""

    running: bool
    cycles_completed: int
    ticks_completed: int
    interval_seconds: float
