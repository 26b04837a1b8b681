"""Team Directory: verifies naming, ordered membership preconditions and deletion.

Tests:
    - add_member requires an attached team and a participating user without a team
    - add_member and remove_member keep all three pointers in agreement
    - delete requires a detached, empty team
"""

import pytest

from scavenger.core.errors import (
    AlreadyExistsError, InvalidStateError, NotFoundError, ValidationError,
)


async def test_create_and_name(dirs):
    await dirs.teams.create("t1")
    await dirs.teams.set_name("t1", "Red Foxes")
    team = await dirs.teams.get("t1")
    assert team.team_name == "Red Foxes"
    assert team.is_detached
    with pytest.raises(AlreadyExistsError):
        await dirs.teams.create("t1")


async def test_set_name_rejects_non_string(dirs):
    await dirs.teams.create("t1")
    with pytest.raises(ValidationError):
        await dirs.teams.set_name("t1", 7)


async def test_add_member_requires_session(dirs):
    await dirs.teams.create("t1")
    await dirs.users.create("u1")
    with pytest.raises(InvalidStateError, match="assigned to a session"):
        await dirs.teams.add_member("t1", "u1")


async def test_add_member_requires_participation(hunt):
    await hunt.users.create("u2")
    with pytest.raises(InvalidStateError, match="part of the session"):
        await hunt.teams.add_member("t1", "u2")


async def test_add_member_writes_three_sides(hunt, store, assert_consistent):
    await hunt.teams.add_member("t1", "u1")
    assert await store.read("teams/t1/members/u1") is True
    assert await store.read("sessions/s1/participants/u1") == "t1"
    assert await store.read("users/u1/sessionsJoined/s1/teamId") == "t1"
    await assert_consistent()


async def test_add_member_twice_rejected(hunt):
    await hunt.teams.add_member("t1", "u1")
    with pytest.raises(InvalidStateError, match="already a member"):
        await hunt.teams.add_member("t1", "u1")


async def test_add_member_on_another_team_rejected(hunt, assert_consistent):
    await hunt.teams.create("t2")
    await hunt.sessions.add_team("s1", "t2")
    await hunt.teams.add_member("t1", "u1")
    with pytest.raises(InvalidStateError, match="another team"):
        await hunt.teams.add_member("t2", "u1")
    await assert_consistent()


async def test_add_member_missing_team(dirs):
    with pytest.raises(NotFoundError):
        await dirs.teams.add_member("ghost", "u1")


async def test_remove_member_clears_three_sides(hunt, store, assert_consistent):
    await hunt.teams.add_member("t1", "u1")
    await hunt.teams.remove_member("t1", "u1")
    assert await hunt.teams.list_members("t1") == []
    assert await store.read("sessions/s1/participants/u1") == ""
    assert not await store.exists("users/u1/sessionsJoined/s1/teamId")
    await assert_consistent()


async def test_remove_non_member_rejected(hunt):
    with pytest.raises(InvalidStateError):
        await hunt.teams.remove_member("t1", "u1")


async def test_delete_requires_detached_and_empty(hunt):
    with pytest.raises(InvalidStateError, match="from session"):
        await hunt.teams.delete("t1")
    await hunt.sessions.remove_team("s1", "t1")
    await hunt.teams.delete("t1")
    assert await hunt.teams.get("t1") is None


async def test_delete_rejects_detached_team_with_members(dirs, store):
    # only reachable from hand-written store state
    await store.write("teams/t9", {"teamName": "Stray", "members": {"u1": True}})
    with pytest.raises(InvalidStateError, match="team members"):
        await dirs.teams.delete("t9")
    assert await dirs.teams.list_members("t9") == ["u1"]


async def test_get_session(hunt):
    assert await hunt.teams.get_session("t1") == "s1"
    await hunt.teams.create("t2")
    assert await hunt.teams.get_session("t2") is None
    with pytest.raises(NotFoundError):
        await hunt.teams.get_session("ghost")
