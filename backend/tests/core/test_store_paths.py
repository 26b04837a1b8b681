"""Store Paths: verifies key validation and the typed key layout.

Tests:
    - Forbidden characters and empty ids are rejected with ValidationError
    - KeySpace builds every association path under the optional namespace
    - Schema segments are never validated as ids
"""

import pytest

from scavenger.core.domain_types import EntityKind, UserField
from scavenger.core.errors import InvalidStateError, ValidationError
from scavenger.core.paths import KeySpace, Segment, StorePath, validate_key


@pytest.mark.parametrize("bad", ["", "a/b", "a.b", "a#b", "a$b", "a[b", "a]b"])
def test_validate_key_rejects_unaddressable_ids(bad):
    with pytest.raises(ValidationError):
        validate_key(bad)


def test_validate_key_rejects_non_strings():
    with pytest.raises(ValidationError):
        validate_key(42)


def test_validation_error_is_an_invalid_state_error():
    with pytest.raises(InvalidStateError):
        validate_key("x/y", "user_id")


def test_validate_key_accepts_ordinary_ids():
    assert validate_key("user-1_A%") == "user-1_A%"


def test_store_path_parse_ignores_empty_segments():
    assert StorePath.parse("/users//u1/").parts == ("users", "u1")
    assert str(StorePath.parse("")) == ""


def test_store_path_child_parent_name():
    p = StorePath.parse("users").child("u1", Segment.SESSIONS_JOINED)
    assert str(p) == "users/u1/sessionsJoined"
    assert p.name == "sessionsJoined"
    assert str(p.parent) == "users/u1"


def test_store_path_child_validates_plain_segments():
    with pytest.raises(ValidationError):
        StorePath().child("bad.id")


def test_key_space_layout_without_namespace():
    keys = KeySpace()
    assert str(keys.user("u1")) == "users/u1"
    assert str(keys.membership_team("u1", "s1")) == "users/u1/sessionsJoined/s1/teamId"
    assert str(keys.membership_points("u1", "s1")) == "users/u1/sessionsJoined/s1/points"
    assert str(keys.found_artifact("u1", "s1", "a1")) == (
        "users/u1/sessionsJoined/s1/foundArtifacts/a1"
    )
    assert str(keys.participant("s1", "u1")) == "sessions/s1/participants/u1"
    assert str(keys.session_team("s1", "t1")) == "sessions/s1/teams/t1"
    assert str(keys.session_artifact("s1", "a1")) == "sessions/s1/artifacts/a1"
    assert str(keys.team_session("t1")) == "teams/t1/sessionId"
    assert str(keys.team_member("t1", "u1")) == "teams/t1/members/u1"
    assert str(keys.artifact("a1")) == "artifacts/a1"


def test_key_space_prefixes_namespace():
    keys = KeySpace("tenants/acme")
    assert str(keys.collection(EntityKind.SESSION)) == "tenants/acme/sessions"
    assert str(keys.user_field("u1", UserField.IS_ADMIN)) == "tenants/acme/users/u1/isAdmin"


def test_key_space_rejects_bad_ids():
    with pytest.raises(ValidationError):
        KeySpace().team_member("t1", "u$1")
