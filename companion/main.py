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

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from companion.api.routes import companion_router, set_tick_runner, set_world
from companion.config import (
    APP_NAME,
    BACKGROUND_TICK_ENABLED,
    CYCLE_INTERVAL_SECONDS,
    DB_DIR_NAME,
    DB_FILENAME,
)
from companion.llm.client import TextGenerationClient
from companion.memory.base import StoreError
from companion.memory.sqlite_store import SQLiteMemoryStore
from companion.world.companion_world import CompanionWorld
from companion.world.tick_runner import TickRunner

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

allow_origins = (
    os.getenv("ALLOW_ORIGINS", "").split(",") if os.getenv("ALLOW_ORIGINS") else None
)


def _default_db_path() -> Path:
    data_home = os.getenv("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    return Path(data_home) / DB_DIR_NAME / DB_FILENAME


def _tick_enabled() -> bool:
    value = os.getenv("COMPANION_TICK_ENABLED")
    if value is None:
        return BACKGROUND_TICK_ENABLED
    return value.strip().lower() in ("1", "true", "yes", "on")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store, restore the companion and run its life loop.

    An unopenable store is fatal: there is nowhere to keep the companion.
    An unreadable snapshot is not: the companion starts fresh.
    """
    db_path = Path(os.getenv("COMPANION_DB_PATH") or _default_db_path())
    store = SQLiteMemoryStore(db_path)

    api_key = os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY") or ""
    llm = TextGenerationClient(api_key=api_key)

    world = CompanionWorld(store=store, llm=llm)
    if not world.llm_available:
        logger.warning("GOOGLE_API_KEY not set, LLM features will be disabled")
    await world.load()
    runner = TickRunner(world, interval_seconds=CYCLE_INTERVAL_SECONDS)

    set_world(world)
    set_tick_runner(runner)

    if _tick_enabled():
        await runner.start()

    yield

    if runner.running:
        await runner.stop()
    try:
        await world.save()
    except StoreError:
        logger.exception("Failed to persist companion state on shutdown")
    await world.close()
    store.close()
    set_tick_runner(None)
    set_world(None)


app = FastAPI(title=APP_NAME, lifespan=lifespan)
app.description = "State, behavior and interaction API for the desktop companion"
if allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(companion_router, prefix="/api/companion")


# Main execution
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)
