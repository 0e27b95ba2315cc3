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

"""Companion agent: a small simulated creature with drives, moods and a bond.

Package layout:
    models/      plain state containers (drives, affinities, enums, events)
    simulation/  per-tick rules, emotion transitions, behavior decisions
    memory/      durable snapshot + interaction log stores
    llm/         text-generation client, prompts and tolerant parsing
    world/       the guarded aggregate owner and its background scheduler
    api/         FastAPI router and pydantic schemas for the front-end
"""
