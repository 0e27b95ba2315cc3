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

"""Tests for companion API routes using FastAPI TestClient."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from companion.api.routes import companion_router, set_tick_runner, set_world
from companion.memory.base import StoreError
from companion.memory.in_memory_store import InMemoryStore
from companion.world.companion_world import CompanionWorld
from companion.world.tick_runner import TickRunner


class FailingStore(InMemoryStore):
    async def recent(self, limit=10):
        raise StoreError("disk full")

    async def save_snapshot(self, key, value):
        raise StoreError("disk full")


def _app() -> FastAPI:
    app = FastAPI()
    app.include_router(companion_router, prefix="/api/companion")
    return app


@pytest.fixture()
def world():
    return CompanionWorld(store=InMemoryStore())


@pytest.fixture()
def client(world):
    """Create a test client with a fresh CompanionWorld."""
    set_world(world)
    yield TestClient(_app())
    set_world(None)
    set_tick_runner(None)


class TestStateEndpoints:
    def test_get_state(self, client):
        resp = client.get("/api/companion/state")
        assert resp.status_code == 200
        data = resp.json()
        assert data["energy"] == pytest.approx(80.0)
        assert data["emotion"] == "calm"
        assert data["behavior"] in {"idle", "sit", "walk", "alert"}
        assert data["is_sleeping"] is False

    def test_click(self, client):
        resp = client.post("/api/companion/click")
        assert resp.status_code == 200
        assert resp.json()["trust"] == pytest.approx(10.5)

    def test_feed(self, client):
        resp = client.post("/api/companion/feed")
        assert resp.status_code == 200
        assert resp.json()["hunger"] == pytest.approx(0.0)

    def test_speak(self, client):
        resp = client.post("/api/companion/speak", json={"message": "hi there"})
        assert resp.status_code == 200
        assert resp.json()["understanding"] == pytest.approx(1.0)

    def test_speak_blank_message(self, client):
        resp = client.post("/api/companion/speak", json={"message": "   "})
        assert resp.status_code == 400

    def test_speak_empty_message(self, client):
        resp = client.post("/api/companion/speak", json={"message": ""})
        assert resp.status_code == 422

    def test_tick(self, client):
        resp = client.post("/api/companion/tick")
        assert resp.status_code == 200
        assert resp.json()["energy"] == pytest.approx(79.5)


class TestLogEndpoints:
    def test_memories_newest_first(self, client):
        client.post("/api/companion/click")
        client.post("/api/companion/feed")
        resp = client.get("/api/companion/memories?limit=5")
        assert resp.status_code == 200
        contents = {m["content"] for m in resp.json()}
        assert contents == {"owner clicked me", "owner fed me"}

    def test_memories_limit_validation(self, client):
        assert client.get("/api/companion/memories?limit=0").status_code == 422
        assert client.get("/api/companion/memories?limit=101").status_code == 422

    def test_events(self, client):
        resp = client.get("/api/companion/events")
        assert resp.status_code == 200
        assert resp.json() == []

    def test_save(self, client, world):
        resp = client.post("/api/companion/save")
        assert resp.status_code == 200
        assert resp.json() == {"status": "saved"}

    def test_store_failures_return_503(self):
        set_world(CompanionWorld(store=FailingStore()))
        try:
            client = TestClient(_app())
            assert client.post("/api/companion/save").status_code == 503
            assert client.get("/api/companion/memories").status_code == 503
        finally:
            set_world(None)


class TestTickRunnerEndpoints:
    def test_status_without_runner(self, client):
        resp = client.get("/api/companion/tick-runner/status")
        assert resp.status_code == 200
        assert resp.json()["running"] is False

    def test_start_without_runner(self, client):
        assert client.post("/api/companion/tick-runner/start").status_code == 503
        assert client.post("/api/companion/tick-runner/stop").status_code == 503

    def test_start_and_stop(self, world):
        set_world(world)
        set_tick_runner(TickRunner(world, interval_seconds=60.0))
        try:
            with TestClient(_app()) as client:
                resp = client.post("/api/companion/tick-runner/start")
                assert resp.status_code == 200
                assert resp.json()["running"] is True
                assert resp.json()["interval_seconds"] == 60.0

                again = client.post("/api/companion/tick-runner/start")
                assert again.status_code == 409

                resp = client.post("/api/companion/tick-runner/stop")
                assert resp.status_code == 200
                assert resp.json()["running"] is False
        finally:
            set_world(None)
            set_tick_runner(None)
