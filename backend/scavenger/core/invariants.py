"""Integrity Checks: detect every broken denormalized pointer in a store snapshot.

Invariants:
    - All functions are PURE: no IO, no async, no store access
    - Each check returns a (possibly empty) list of IntegrityViolation; an empty
      result from check_integrity means every cross-entity rule holds
    - A pointer to an entity that no longer exists is reported once, as
      DANGLING_REFERENCE, and not re-reported under its mirror rule

Rules checked:
    - SESSION_MEMBERSHIP: users/u/sessionsJoined/s exists iff sessions/s/participants/u does
    - TEAM_ASSIGNMENT: a user's teamId, the team's members and the participant
      index agree on a single team per session
    - TEAM_SESSION_LINK: teams/t/sessionId == s iff sessions/s/teams/t
    - FOUND_ARTIFACT: found artifacts are offered by the session
    - CURRENT_SESSION: currentSession points into sessionsJoined
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from scavenger.core.domain_types import EntityKind, NO_TEAM
from scavenger.core.records import Artifact, Session, Team, User


class IntegrityRule(str, Enum):
    SESSION_MEMBERSHIP = "session_membership"
    TEAM_ASSIGNMENT = "team_assignment"
    TEAM_SESSION_LINK = "team_session_link"
    FOUND_ARTIFACT = "found_artifact"
    CURRENT_SESSION = "current_session"
    DANGLING_REFERENCE = "dangling_reference"


@dataclass(frozen=True)
class IntegrityViolation:
    rule: IntegrityRule
    entity: EntityKind
    entity_id: str
    message: str

    def to_dict(self) -> dict:
        return {
            "rule": self.rule.value,
            "entity": self.entity.value,
            "entity_id": self.entity_id,
            "message": self.message,
        }


@dataclass
class StoreSnapshot:
    """Parsed contents of the four top-level collections."""
    users: dict[str, User] = field(default_factory=dict)
    sessions: dict[str, Session] = field(default_factory=dict)
    teams: dict[str, Team] = field(default_factory=dict)
    artifacts: dict[str, Artifact] = field(default_factory=dict)

    @classmethod
    def from_raw(
        cls,
        users: Any = None,
        sessions: Any = None,
        teams: Any = None,
        artifacts: Any = None,
    ) -> "StoreSnapshot":
        return cls(
            users=_parse_collection(User, users),
            sessions=_parse_collection(Session, sessions),
            teams=_parse_collection(Team, teams),
            artifacts=_parse_collection(Artifact, artifacts),
        )


def _parse_collection(record_cls, raw: Any) -> dict:
    if not raw:
        return {}
    return {
        entity_id: record_cls.from_store(payload, entity_id)
        for entity_id, payload in raw.items()
        if payload is not None
    }


def _violation(rule, entity, entity_id, message) -> IntegrityViolation:
    return IntegrityViolation(rule, entity, entity_id, message)


def _dangling(entity, entity_id, message) -> IntegrityViolation:
    return IntegrityViolation(
        IntegrityRule.DANGLING_REFERENCE, entity, entity_id, message,
    )


# ─── Individual checks ───────────────────────────────────────────

def check_session_membership(snap: StoreSnapshot) -> list[IntegrityViolation]:
    found = []
    for uid, user in snap.users.items():
        for sid in user.sessions_joined:
            session = snap.sessions.get(sid)
            if session is None:
                found.append(_dangling(
                    EntityKind.USER, uid,
                    f"User '{uid}' joined missing session '{sid}'",
                ))
            elif uid not in session.participants:
                found.append(_violation(
                    IntegrityRule.SESSION_MEMBERSHIP, EntityKind.USER, uid,
                    f"User '{uid}' lists session '{sid}' but is not a participant there",
                ))
    for sid, session in snap.sessions.items():
        for uid in session.participants:
            user = snap.users.get(uid)
            if user is None:
                found.append(_dangling(
                    EntityKind.SESSION, sid,
                    f"Session '{sid}' lists missing participant '{uid}'",
                ))
            elif sid not in user.sessions_joined:
                found.append(_violation(
                    IntegrityRule.SESSION_MEMBERSHIP, EntityKind.SESSION, sid,
                    f"Session '{sid}' lists participant '{uid}' who has not joined it",
                ))
    return found


def check_team_assignment(snap: StoreSnapshot) -> list[IntegrityViolation]:
    found = []
    for uid, user in snap.users.items():
        for sid, membership in user.sessions_joined.items():
            tid = membership.team_id
            if not tid:
                continue
            team = snap.teams.get(tid)
            if team is None:
                found.append(_dangling(
                    EntityKind.USER, uid,
                    f"User '{uid}' is assigned to missing team '{tid}' in session '{sid}'",
                ))
                continue
            if uid not in team.members:
                found.append(_violation(
                    IntegrityRule.TEAM_ASSIGNMENT, EntityKind.USER, uid,
                    f"User '{uid}' points at team '{tid}' which does not list them",
                ))
            session = snap.sessions.get(sid)
            if session is not None and session.participants.get(uid) != tid:
                found.append(_violation(
                    IntegrityRule.TEAM_ASSIGNMENT, EntityKind.USER, uid,
                    f"User '{uid}' is on team '{tid}' but session '{sid}' "
                    f"indexes them under '{session.participants.get(uid)}'",
                ))

    for tid, team in snap.teams.items():
        for uid in team.members:
            if team.session_id is None:
                found.append(_violation(
                    IntegrityRule.TEAM_ASSIGNMENT, EntityKind.TEAM, tid,
                    f"Team '{tid}' has member '{uid}' but no session",
                ))
                continue
            user = snap.users.get(uid)
            if user is None:
                found.append(_dangling(
                    EntityKind.TEAM, tid, f"Team '{tid}' lists missing member '{uid}'",
                ))
            elif user.team_in(team.session_id) != tid:
                found.append(_violation(
                    IntegrityRule.TEAM_ASSIGNMENT, EntityKind.TEAM, tid,
                    f"Team '{tid}' lists member '{uid}' whose membership in "
                    f"session '{team.session_id}' does not point back",
                ))

    for sid, session in snap.sessions.items():
        for uid, tid in session.participants.items():
            if tid == NO_TEAM:
                continue
            team = snap.teams.get(tid)
            if team is None:
                found.append(_dangling(
                    EntityKind.SESSION, sid,
                    f"Session '{sid}' indexes participant '{uid}' under missing team '{tid}'",
                ))
            elif uid not in team.members:
                found.append(_violation(
                    IntegrityRule.TEAM_ASSIGNMENT, EntityKind.SESSION, sid,
                    f"Session '{sid}' indexes '{uid}' under team '{tid}' "
                    f"which does not list them",
                ))
    return found


def check_team_session_link(snap: StoreSnapshot) -> list[IntegrityViolation]:
    found = []
    for tid, team in snap.teams.items():
        sid = team.session_id
        if sid is None:
            continue
        session = snap.sessions.get(sid)
        if session is None:
            found.append(_dangling(
                EntityKind.TEAM, tid, f"Team '{tid}' points at missing session '{sid}'",
            ))
        elif tid not in session.teams:
            found.append(_violation(
                IntegrityRule.TEAM_SESSION_LINK, EntityKind.TEAM, tid,
                f"Team '{tid}' points at session '{sid}' which does not list it",
            ))
    for sid, session in snap.sessions.items():
        for tid in session.teams:
            team = snap.teams.get(tid)
            if team is None:
                found.append(_dangling(
                    EntityKind.SESSION, sid, f"Session '{sid}' lists missing team '{tid}'",
                ))
            elif team.session_id != sid:
                found.append(_violation(
                    IntegrityRule.TEAM_SESSION_LINK, EntityKind.SESSION, sid,
                    f"Session '{sid}' lists team '{tid}' which points at "
                    f"'{team.session_id}'",
                ))
    return found


def check_found_artifacts(snap: StoreSnapshot) -> list[IntegrityViolation]:
    found = []
    for uid, user in snap.users.items():
        for sid, membership in user.sessions_joined.items():
            session = snap.sessions.get(sid)
            if session is None:
                continue
            for aid in sorted(membership.found_artifacts - session.artifacts):
                found.append(_violation(
                    IntegrityRule.FOUND_ARTIFACT, EntityKind.USER, uid,
                    f"User '{uid}' found artifact '{aid}' which session "
                    f"'{sid}' does not offer",
                ))
    for sid, session in snap.sessions.items():
        for aid in sorted(session.artifacts):
            if aid not in snap.artifacts:
                found.append(_dangling(
                    EntityKind.SESSION, sid, f"Session '{sid}' offers missing artifact '{aid}'",
                ))
    return found


def check_current_session(snap: StoreSnapshot) -> list[IntegrityViolation]:
    return [
        _violation(
            IntegrityRule.CURRENT_SESSION, EntityKind.USER, uid,
            f"User '{uid}' has current session '{user.current_session}' "
            f"they have not joined",
        )
        for uid, user in snap.users.items()
        if user.current_session and user.current_session not in user.sessions_joined
    ]


def check_integrity(snap: StoreSnapshot) -> list[IntegrityViolation]:
    """Run every check. Returns all violations, empty when consistent."""
    return [
        *check_session_membership(snap),
        *check_team_assignment(snap),
        *check_team_session_link(snap),
        *check_found_artifacts(snap),
        *check_current_session(snap),
    ]
