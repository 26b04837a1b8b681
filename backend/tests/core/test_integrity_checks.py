"""Integrity Checks: verifies each rule on hand-built snapshots.

Tests:
    - A consistent snapshot yields no violations
    - Each broken pointer pair is reported under its own rule
    - Pointers to missing entities are reported as DANGLING_REFERENCE
"""

from scavenger.core.invariants import IntegrityRule, StoreSnapshot, check_integrity


def _consistent() -> dict:
    return {
        "users": {
            "u1": {
                "username": "ann",
                "currentSession": "s1",
                "sessionsJoined": {
                    "s1": {"teamId": "t1", "points": 10, "foundArtifacts": {"a1": True}},
                },
            },
            "u2": {"sessionsJoined": {"s1": {"points": 0}}},
        },
        "sessions": {
            "s1": {
                "creatorId": "u1",
                "teams": {"t1": True},
                "participants": {"u1": "t1", "u2": ""},
                "artifacts": {"a1": True},
            },
        },
        "teams": {"t1": {"teamName": "Red", "sessionId": "s1", "members": {"u1": True}}},
        "artifacts": {"a1": {"name": "Statue"}},
    }


def _rules(raw: dict) -> set[IntegrityRule]:
    return {v.rule for v in check_integrity(StoreSnapshot.from_raw(**raw))}


def test_consistent_snapshot_has_no_violations():
    assert check_integrity(StoreSnapshot.from_raw(**_consistent())) == []


def test_empty_store_is_consistent():
    assert check_integrity(StoreSnapshot.from_raw()) == []


def test_membership_without_participant_entry():
    raw = _consistent()
    del raw["sessions"]["s1"]["participants"]["u2"]
    assert _rules(raw) == {IntegrityRule.SESSION_MEMBERSHIP}


def test_participant_without_membership():
    raw = _consistent()
    raw["sessions"]["s1"]["participants"]["u3"] = ""
    raw["users"]["u3"] = {"username": "cy"}
    assert _rules(raw) == {IntegrityRule.SESSION_MEMBERSHIP}


def test_team_member_missing_on_team_side():
    raw = _consistent()
    raw["teams"]["t1"]["members"] = {}
    assert IntegrityRule.TEAM_ASSIGNMENT in _rules(raw)


def test_participant_index_disagrees_with_team():
    raw = _consistent()
    raw["sessions"]["s1"]["participants"]["u1"] = ""
    assert _rules(raw) == {IntegrityRule.TEAM_ASSIGNMENT}


def test_team_points_at_session_that_does_not_list_it():
    raw = _consistent()
    raw["teams"]["t2"] = {"sessionId": "s1"}
    assert _rules(raw) == {IntegrityRule.TEAM_SESSION_LINK}


def test_found_artifact_not_offered_by_session():
    raw = _consistent()
    raw["users"]["u2"]["sessionsJoined"]["s1"]["foundArtifacts"] = {"a9": True}
    assert _rules(raw) == {IntegrityRule.FOUND_ARTIFACT}


def test_current_session_not_joined():
    raw = _consistent()
    raw["users"]["u2"]["currentSession"] = "s7"
    assert _rules(raw) == {IntegrityRule.CURRENT_SESSION}


def test_dangling_artifact_reference():
    raw = _consistent()
    raw["artifacts"] = {}
    violations = check_integrity(StoreSnapshot.from_raw(**raw))
    assert [v.rule for v in violations] == [IntegrityRule.DANGLING_REFERENCE]
    assert violations[0].entity_id == "s1"


def test_violation_to_dict():
    raw = _consistent()
    raw["users"]["u2"]["currentSession"] = "s7"
    (violation,) = check_integrity(StoreSnapshot.from_raw(**raw))
    assert violation.to_dict() == {
        "rule": "current_session",
        "entity": "users",
        "entity_id": "u2",
        "message": violation.message,
    }
