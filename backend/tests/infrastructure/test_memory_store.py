"""In-Memory Store: verifies the tree semantics every directory relies on.

Tests:
    - Writing None deletes; empty maps are never materialized
    - Deleting the last child removes the emptied parents
    - Reads return copies
"""

import pytest

from scavenger.core.errors import StoreError
from scavenger.infrastructure.memory_store import InMemoryKeyValueStore


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


async def test_write_then_read(store):
    await store.write("users/u1", {"username": "ann", "isAdmin": False})
    assert await store.read("users/u1/username") == "ann"
    assert await store.read("users/u1") == {"username": "ann", "isAdmin": False}


async def test_missing_path_reads_none(store):
    assert await store.read("users/nobody") is None
    assert not await store.exists("users/nobody")


async def test_empty_map_is_not_materialized(store):
    await store.write("sessions/s1/teams", {})
    assert not await store.exists("sessions/s1")


async def test_empty_string_is_a_value(store):
    await store.write("sessions/s1/participants/u1", "")
    assert await store.exists("sessions/s1/participants/u1")
    assert await store.read("sessions/s1/participants/u1") == ""


async def test_writing_none_deletes(store):
    await store.write("teams/t1/sessionId", "s1")
    await store.write("teams/t1/sessionId", None)
    assert await store.read("teams/t1") is None


async def test_delete_prunes_empty_parents(store):
    await store.write("users/u1/sessionsJoined/s1/foundArtifacts/a1", True)
    await store.write("users/u1/username", "ann")
    await store.delete("users/u1/sessionsJoined/s1/foundArtifacts/a1")
    assert await store.read("users/u1") == {"username": "ann"}


async def test_write_below_leaf_replaces_leaf(store):
    await store.write("a/b", 1)
    await store.write("a/b/c", 2)
    assert await store.read("a") == {"b": {"c": 2}}


async def test_read_returns_a_copy(store):
    await store.write("teams/t1/members/u1", True)
    snapshot = await store.read("teams/t1")
    snapshot["members"]["u2"] = True
    assert await store.read("teams/t1/members") == {"u1": True}


async def test_root_must_be_a_map(store):
    with pytest.raises(StoreError):
        await store.write("", 5)


def test_initial_contents_are_pruned():
    store = InMemoryKeyValueStore({"users": {}, "teams": {"t1": {"teamName": "Red"}}})
    assert store.dump() == {"teams": {"t1": {"teamName": "Red"}}}
