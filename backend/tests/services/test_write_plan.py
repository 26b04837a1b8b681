"""Write Plan: verifies ordered commit and saga compensation on partial failure.

Tests:
    - Steps apply in order; deletes and writes mix freely
    - A failing step rolls back every applied step (prior values restored)
    - A failing compensation is reported as compensated=False
    - A directory operation that fails midway leaves no half-written association
    - Compensation restores the tree on both the memory and SQL adapters
"""

import pytest

from scavenger.core.errors import PartialCommitError, StoreError
from scavenger.core.paths import StorePath
from scavenger.infrastructure.memory_store import InMemoryKeyValueStore
from scavenger.services.directories import Directories
from scavenger.services.unit_of_work import WritePlan


class FlakyStore(InMemoryKeyValueStore):
    """Fails writes/deletes whose path contains any of the given fragments."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.fail_on: set[str] = set()
        self.fail_deletes = False

    def _check(self, path: str) -> None:
        if any(fragment in path for fragment in self.fail_on):
            raise StoreError("injected failure", "write", path)

    async def write(self, path, value):
        self._check(path)
        await super().write(path, value)

    async def delete(self, path):
        if self.fail_deletes:
            raise StoreError("injected failure", "delete", path)
        self._check(path)
        await super().delete(path)


def _p(raw: str) -> StorePath:
    return StorePath.parse(raw)


async def test_commit_applies_steps_in_order():
    store = InMemoryKeyValueStore({"a": {"x": 1}})
    plan = WritePlan(store, "test").write(_p("a/y"), 2).delete(_p("a/x")).write(_p("a/y"), 3)
    assert len(plan) == 3
    assert plan.steps[1].is_delete
    await plan.commit()
    assert store.dump() == {"a": {"y": 3}}


async def test_failure_restores_prior_values():
    store = FlakyStore({"teams": {"t1": {"teamName": "Red"}}, "sessions": {"s1": {"sessionName": "H"}}})
    store.fail_on = {"sessions/s1/teams"}
    before = store.dump()
    plan = (
        WritePlan(store, "link")
        .write(_p("teams/t1/sessionId"), "s1")
        .write(_p("teams/t1/teamName"), "Blue")
        .write(_p("sessions/s1/teams/t1"), True)
    )
    with pytest.raises(PartialCommitError) as exc_info:
        await plan.commit()
    err = exc_info.value
    assert err.failed_path == "sessions/s1/teams/t1"
    assert err.applied == 2
    assert err.compensated is True
    assert isinstance(err.__cause__, StoreError)
    assert store.dump() == before


async def test_failed_compensation_is_reported():
    store = FlakyStore()
    store.fail_on = {"b"}
    store.fail_deletes = True
    plan = WritePlan(store, "broken").write(_p("a"), 1).write(_p("b"), 2)
    with pytest.raises(PartialCommitError) as exc_info:
        await plan.commit()
    assert exc_info.value.compensated is False
    assert store.dump() == {"a": 1}


async def test_directory_operation_rolls_back_association():
    store = FlakyStore()
    dirs = Directories(store)
    await dirs.users.create("u1")
    await dirs.sessions.create("s1", "u1")
    await dirs.teams.create("t1")
    await dirs.sessions.add_team("s1", "t1")
    await dirs.users.join_session("u1", "s1")
    before = store.dump()

    # the participant index is the last pointer assign_member writes
    store.fail_on = {"sessions/s1/participants"}
    with pytest.raises(PartialCommitError):
        await dirs.users.assign_team("u1", "s1", "t1")
    assert store.dump() == before

    store.fail_on = set()
    violations = await dirs.audit()
    assert violations == []


class FailingWrites:
    """Wraps any adapter; writes whose path contains `fail_on` raise."""

    def __init__(self, inner, fail_on: str):
        self.inner = inner
        self.fail_on = fail_on
        self.armed = False

    async def exists(self, path):
        return await self.inner.exists(path)

    async def read(self, path):
        return await self.inner.read(path)

    async def write(self, path, value):
        if self.armed and self.fail_on in path:
            raise StoreError("injected failure", "write", path)
        await self.inner.write(path, value)

    async def delete(self, path):
        await self.inner.delete(path)


async def test_team_link_rolls_back_on_each_adapter(store):
    # the team side is the second pointer link_team writes
    wrapped = FailingWrites(store, "teams/t1/sessionId")
    dirs = Directories(wrapped)
    await dirs.users.create("u1")
    await dirs.sessions.create("s1", "u1")
    await dirs.teams.create("t1")
    before = await store.read("")

    wrapped.armed = True
    with pytest.raises(PartialCommitError) as exc_info:
        await dirs.sessions.add_team("s1", "t1")
    assert exc_info.value.compensated is True
    assert exc_info.value.applied == 1
    assert await store.read("") == before
    assert await dirs.teams.get_session("t1") is None
