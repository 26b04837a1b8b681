"""Service test fixtures: both store adapters, the four directories, and a world builder.

Invariants:
    - Every test runs once per adapter: InMemoryKeyValueStore (yields on each
      call, like a remote store) and SqlKeyValueStore on a temporary SQLite file
    - `dirs` is serialized (the production default)
    - assert_consistent() runs the full integrity audit; tests call it after each step
"""

import pytest

from scavenger.infrastructure.database import DatabaseSessionManager
from scavenger.infrastructure.memory_store import InMemoryKeyValueStore
from scavenger.infrastructure.sql_store import SqlKeyValueStore
from scavenger.services.directories import Directories


class TickingClock:
    """Deterministic millisecond clock; advances by one on every read."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        self.now += 1
        return self.now


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture(params=["memory", "sql"])
async def store(request, tmp_path):
    if request.param == "memory":
        yield InMemoryKeyValueStore()
        return
    manager = DatabaseSessionManager(f"sqlite+aiosqlite:///{tmp_path / 'kv.db'}")
    await manager.create_schema()
    yield SqlKeyValueStore(manager)
    await manager.dispose()


@pytest.fixture
def dirs(store):
    return Directories(store)


@pytest.fixture
def assert_consistent(dirs):
    async def check():
        violations = await dirs.auditor.audit()
        assert violations == [], [v.message for v in violations]
    return check


@pytest.fixture
async def hunt(dirs):
    """Session s1 with team t1 attached, artifact a1 offered, user u1 joined."""
    await dirs.users.create("u1")
    await dirs.sessions.create("s1", "u1")
    await dirs.teams.create("t1")
    await dirs.artifacts.create("a1")
    await dirs.sessions.add_team("s1", "t1")
    await dirs.sessions.add_artifact("s1", "a1")
    await dirs.users.join_session("u1", "s1")
    return dirs
