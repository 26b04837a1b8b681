"""Entity Records: verifies parsing from and rendering to the stored shape.

Tests:
    - Missing collections parse as empty; unknown keys are ignored
    - The "" sentinel parses as "no team" on both memberships and teams
    - to_store() renders sets as {id: true} maps with camelCase keys
    - Malformed payloads raise InvalidStateError(MALFORMED_RECORD)
"""

import pytest

from scavenger.core.errors import InvalidStateError
from scavenger.core.records import Artifact, Membership, Session, Team, User


def test_from_store_none_is_none():
    assert User.from_store(None) is None


def test_user_blank_round_trips_through_store_shape():
    user = User.blank(1000)
    stored = user.to_store()
    assert stored["username"] == ""
    assert stored["isAdmin"] is False
    assert stored["createdAt"] == stored["updatedAt"] == 1000
    assert stored["sessionsJoined"] == {}
    assert User.from_store(stored) == user


def test_user_missing_sessions_joined_is_empty():
    user = User.from_store({"username": "ann", "email": "a@x"})
    assert user.sessions_joined == {}
    assert user.membership("s1") is None


def test_membership_parses_sentinel_and_found_map():
    user = User.from_store({
        "sessionsJoined": {
            "s1": {"teamId": "", "points": 3, "foundArtifacts": {"a1": True, "a2": True}},
            "s2": {"teamId": "t9", "points": 0},
        },
    })
    assert user.team_in("s1") is None
    assert user.membership("s1").found_artifacts == {"a1", "a2"}
    assert user.team_in("s2") == "t9"
    assert user.membership("s2").found_artifacts == set()


def test_membership_to_store_uses_id_maps():
    m = Membership(team_id="t1", points=5, found_artifacts={"b", "a"})
    assert m.to_store() == {
        "teamId": "t1", "points": 5, "foundArtifacts": {"a": True, "b": True},
    }


def test_session_parses_sets_and_participants():
    session = Session.from_store({
        "sessionName": "Hunt", "creatorId": "u0",
        "startTime": 1, "endTime": 2, "isActive": True,
        "teams": {"t1": True},
        "participants": {"u1": "", "u2": "t1"},
        "artifacts": {"a1": True},
        "legacyField": "ignored",
    })
    assert session.teams == {"t1"}
    assert session.participants == {"u1": "", "u2": "t1"}
    assert session.artifacts == {"a1"}
    assert not session.is_empty


def test_session_blank_is_empty():
    session = Session.blank("creator")
    assert session.is_empty
    stored = session.to_store()
    assert stored["creatorId"] == "creator"
    assert stored["startTime"] == 0 and stored["endTime"] == 0
    assert stored["isActive"] is False


def test_team_sentinel_session_is_detached():
    team = Team.from_store({"teamName": "Red", "sessionId": "", "members": {}})
    assert team.session_id is None
    assert team.is_detached


def test_team_with_members_is_not_detached():
    team = Team.from_store({"sessionId": "s1", "members": {"u1": True}})
    assert not team.is_detached
    assert team.to_store()["members"] == {"u1": True}


def test_artifact_optional_urls_are_omitted():
    stored = Artifact.blank().to_store()
    assert "imageUrl" not in stored and "audioUrl" not in stored
    assert stored["latitude"] == 0.0


def test_malformed_record_raises_invalid_state():
    with pytest.raises(InvalidStateError) as exc_info:
        Session.from_store({"startTime": "not a number"}, "s1")
    assert exc_info.value.code == "MALFORMED_RECORD"
    assert "s1" in exc_info.value.message
