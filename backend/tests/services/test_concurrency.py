"""Concurrency: verifies the read-check-then-write race and the facade's guard.

Tests:
    - Unserialized concurrent add_team of one team to two sessions breaks the
      team <-> session link (both checks pass before either write lands)
    - With the shared guard, exactly one caller wins and the other is rejected
    - The guard is shared across directories of one facade
"""

import asyncio

from scavenger.core.errors import InvalidStateError
from scavenger.core.invariants import IntegrityRule
from scavenger.infrastructure.memory_store import InMemoryKeyValueStore
from scavenger.services.directories import Directories


async def _two_sessions_one_team(dirs):
    await dirs.users.create("u1")
    await dirs.sessions.create("s1", "u1")
    await dirs.sessions.create("s2", "u1")
    await dirs.teams.create("t1")


async def test_unserialized_add_team_race_breaks_link():
    # the memory store yields exactly once per call, so the interleaving is fixed
    raw_dirs = Directories(InMemoryKeyValueStore(), serialize=False)
    await _two_sessions_one_team(raw_dirs)
    results = await asyncio.gather(
        raw_dirs.sessions.add_team("s1", "t1"),
        raw_dirs.sessions.add_team("s2", "t1"),
        return_exceptions=True,
    )
    assert results == [None, None]
    violations = await raw_dirs.audit()
    assert IntegrityRule.TEAM_SESSION_LINK in {v.rule for v in violations}


async def test_serialized_add_team_admits_one_winner(dirs, assert_consistent):
    await _two_sessions_one_team(dirs)
    results = await asyncio.gather(
        dirs.sessions.add_team("s1", "t1"),
        dirs.sessions.add_team("s2", "t1"),
        return_exceptions=True,
    )
    assert results[0] is None
    assert isinstance(results[1], InvalidStateError)
    assert await dirs.teams.get_session("t1") == "s1"
    await assert_consistent()


async def test_guard_is_shared_across_directories(dirs):
    assert dirs.users._guard is dirs.sessions._guard is dirs.teams._guard
    assert dirs.artifacts._guard is dirs.guard


async def test_serialized_join_and_delete_do_not_interleave(dirs, assert_consistent):
    await dirs.users.create("u1")
    await dirs.sessions.create("s1", "u1")
    results = await asyncio.gather(
        dirs.users.join_session("u1", "s1"),
        dirs.sessions.delete("s1"),
        return_exceptions=True,
    )
    assert results[0] is None
    assert isinstance(results[1], InvalidStateError)
    await assert_consistent()
