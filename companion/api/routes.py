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

"""Companion API routes for the desktop front-end.

Provides REST endpoints for the reporting snapshot, user interactions,
manual ticks, the interaction log, pending events and the background
tick runner.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query

from companion.config import MAX_MEMORY_QUERY
from companion.memory.base import StoreError
from companion.models.events import CompanionSnapshot
from companion.world.companion_world import CompanionWorld
from companion.world.tick_runner import TickRunner

from .schemas import (
    EventResponse,
    MemoryResponse,
    SpeakRequest,
    StateResponse,
    TickRunnerStatusResponse,
)

logger = logging.getLogger(__name__)

# Module-level singletons (set during app startup)
_world: CompanionWorld | None = None
_tick_runner: TickRunner | None = None


def get_world() -> CompanionWorld:
    """Get the companion world singleton.

    Raises:
        RuntimeError: If the world is not initialized.
    """
    if _world is None:
        raise RuntimeError("Companion world not initialized.")
    return _world


def set_world(world: CompanionWorld | None) -> None:
    """Set the companion world singleton."""
    global _world
    _world = world


def get_tick_runner() -> TickRunner | None:
    """Get the tick runner singleton (may be None)."""
    return _tick_runner


def set_tick_runner(runner: TickRunner | None) -> None:
    """Set the tick runner singleton."""
    global _tick_runner
    _tick_runner = runner


companion_router = APIRouter(tags=["companion"])


def _to_response(snapshot: CompanionSnapshot) -> StateResponse:
    return StateResponse(**snapshot.to_dict())


def _runner_status(runner: TickRunner | None) -> TickRunnerStatusResponse:
    if runner is None:
        return TickRunnerStatusResponse(
            running=False,
            cycles_completed=0,
            ticks_completed=0,
            interval_seconds=0.0,
        )
    return TickRunnerStatusResponse(
        running=runner.running,
        cycles_completed=runner.cycles_completed,
        ticks_completed=runner.ticks_completed,
        interval_seconds=runner.interval_seconds,
    )


# --- State & Interaction Endpoints ---


@companion_router.get("/state", response_model=StateResponse)
async def get_state() -> StateResponse:
    """Get the current reporting snapshot."""
    return _to_response(await get_world().snapshot())


@companion_router.post("/click", response_model=StateResponse)
async def click() -> StateResponse:
    """The owner clicked the companion."""
    return _to_response(await get_world().click())


@companion_router.post("/feed", response_model=StateResponse)
async def feed() -> StateResponse:
    """The owner fed the companion."""
    return _to_response(await get_world().feed())


@companion_router.post("/speak", response_model=StateResponse)
async def speak(req: SpeakRequest) -> StateResponse:
    """The owner talked to the companion.

    The reaction arrives later through GET /events.
    """
    message = req.message.strip()
    if not message:
        raise HTTPException(status_code=400, detail="message must not be blank.")
    return _to_response(await get_world().speak(message))


@companion_router.post("/tick", response_model=StateResponse)
async def tick() -> StateResponse:
    """Advance the companion by one simulated minute."""
    return _to_response(await get_world().tick())


# --- Log, Events & Persistence ---


@companion_router.get("/memories", response_model=list[MemoryResponse])
async def list_memories(
    limit: int = Query(default=10, ge=1, le=MAX_MEMORY_QUERY),
) -> list[MemoryResponse]:
    """Most recent interaction/thought records, newest first."""
    try:
        entries = await get_world().recent_memories(limit)
    except StoreError as e:
        raise HTTPException(status_code=503, detail=str(e)) from e
    return [
        MemoryResponse(
            memory_id=entry.memory_id,
            kind=entry.kind,
            content=entry.content,
            weight=entry.weight,
            timestamp=entry.timestamp,
        )
        for entry in entries
    ]


@companion_router.get("/events", response_model=list[EventResponse])
def drain_events() -> list[EventResponse]:
    """Pop all pending front-end events."""
    return [
        EventResponse(kind=event.kind, data=event.to_dict())
        for event in get_world().drain_events()
    ]


@companion_router.post("/save")
async def save() -> dict[str, str]:
    """Persist the companion state now."""
    try:
        await get_world().save()
    except StoreError as e:
        logger.exception("Manual save failed")
        raise HTTPException(status_code=503, detail=str(e)) from e
    return {"status": "saved"}


# --- Tick Runner Endpoints ---


@companion_router.post("/tick-runner/start", response_model=TickRunnerStatusResponse)
async def start_tick_runner() -> TickRunnerStatusResponse:
    """Start the background tick runner."""
    runner = get_tick_runner()
    if runner is None:
        raise HTTPException(status_code=503, detail="Tick runner not configured.")
    if runner.running:
        raise HTTPException(status_code=409, detail="Tick runner already running.")
    await runner.start()
    return _runner_status(runner)


@companion_router.post("/tick-runner/stop", response_model=TickRunnerStatusResponse)
async def stop_tick_runner() -> TickRunnerStatusResponse:
    """Stop the background tick runner."""
    runner = get_tick_runner()
    if runner is None:
        raise HTTPException(status_code=503, detail="Tick runner not configured.")
    await runner.stop()
    return _runner_status(runner)


@companion_router.get("/tick-runner/status", response_model=TickRunnerStatusResponse)
def tick_runner_status() -> TickRunnerStatusResponse:
    """Get tick runner status."""
    return _runner_status(get_tick_runner())
