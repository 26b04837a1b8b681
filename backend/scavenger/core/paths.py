"""Store Paths: typed keys into the hierarchical key-value namespace.

Invariants:
    - StorePath is immutable; str(path) is the slash-joined address the store sees
    - Every id segment is validated before a path is built (ValidationError)
    - KeySpace is the only place path layouts are spelled out; directories never
      format path strings themselves

Layout (relative to the optional namespace root):
    users/{uid}/sessionsJoined/{sid}/{teamId|points|foundArtifacts/{aid}}
    sessions/{sid}/{teams/{tid}|participants/{uid}|artifacts/{aid}}
    teams/{tid}/{sessionId|members/{uid}}
    artifacts/{aid}
"""

from dataclasses import dataclass
from enum import Enum

from scavenger.core.domain_types import (
    EntityKind, FORBIDDEN_KEY_CHARS,
    UserId, SessionId, TeamId, ArtifactId,
)
from scavenger.core.errors import ValidationError


def validate_key(segment: str, field: str = "id") -> str:
    """Reject ids the store cannot address as a single path segment."""
    if not isinstance(segment, str) or not segment:
        raise ValidationError(f"{field} must be a non-empty string", field)
    bad = sorted(set(segment) & FORBIDDEN_KEY_CHARS)
    if bad:
        raise ValidationError(
            f"{field} '{segment}' contains forbidden characters: {''.join(bad)}",
            field,
        )
    return segment


@dataclass(frozen=True)
class StorePath:
    """An address in the store tree, as a tuple of validated segments."""
    parts: tuple[str, ...] = ()

    @classmethod
    def parse(cls, raw: str) -> "StorePath":
        """Build from a slash-delimited string, ignoring empty segments."""
        segments = tuple(s for s in raw.split("/") if s)
        for s in segments:
            validate_key(s, "path segment")
        return cls(segments)

    def child(self, *segments: str | Enum) -> "StorePath":
        values = tuple(
            s.value if isinstance(s, Enum) else validate_key(s) for s in segments
        )
        return StorePath(self.parts + values)

    @property
    def parent(self) -> "StorePath":
        return StorePath(self.parts[:-1])

    @property
    def name(self) -> str:
        return self.parts[-1] if self.parts else ""

    def __str__(self) -> str:
        return "/".join(self.parts)


class Segment(str, Enum):
    """Fixed schema keys below an entity; never validated as ids."""
    SESSIONS_JOINED = "sessionsJoined"
    TEAM_ID = "teamId"
    POINTS = "points"
    FOUND_ARTIFACTS = "foundArtifacts"
    CURRENT_SESSION = "currentSession"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
    TEAMS = "teams"
    PARTICIPANTS = "participants"
    ARTIFACTS = "artifacts"
    START_TIME = "startTime"
    END_TIME = "endTime"
    CREATOR_ID = "creatorId"
    TEAM_NAME = "teamName"
    SESSION_ID = "sessionId"
    MEMBERS = "members"
    LATITUDE = "latitude"
    LONGITUDE = "longitude"


class KeySpace:
    """Typed key builders for every entity and association field.

    One KeySpace per store namespace. All four directories share one, so
    they agree on where each denormalized pointer lives.
    """

    def __init__(self, namespace: str = ""):
        self.root = StorePath.parse(namespace)

    def collection(self, kind: EntityKind) -> StorePath:
        return self.root.child(kind)

    def entity(self, kind: EntityKind, entity_id: str) -> StorePath:
        return self.root.child(kind, entity_id)

    # ─── Users ───────────────────────────────────────────────────

    def user(self, user_id: UserId) -> StorePath:
        return self.entity(EntityKind.USER, user_id)

    def user_field(self, user_id: UserId, field: Enum) -> StorePath:
        return self.user(user_id).child(field)

    def membership(self, user_id: UserId, session_id: SessionId) -> StorePath:
        return self.user(user_id).child(Segment.SESSIONS_JOINED, session_id)

    def membership_team(self, user_id: UserId, session_id: SessionId) -> StorePath:
        return self.membership(user_id, session_id).child(Segment.TEAM_ID)

    def membership_points(self, user_id: UserId, session_id: SessionId) -> StorePath:
        return self.membership(user_id, session_id).child(Segment.POINTS)

    def found_artifact(
        self, user_id: UserId, session_id: SessionId, artifact_id: ArtifactId,
    ) -> StorePath:
        return self.membership(user_id, session_id).child(
            Segment.FOUND_ARTIFACTS, artifact_id,
        )

    # ─── Sessions ────────────────────────────────────────────────

    def session(self, session_id: SessionId) -> StorePath:
        return self.entity(EntityKind.SESSION, session_id)

    def session_field(self, session_id: SessionId, field: Enum) -> StorePath:
        return self.session(session_id).child(field)

    def session_team(self, session_id: SessionId, team_id: TeamId) -> StorePath:
        return self.session(session_id).child(Segment.TEAMS, team_id)

    def participant(self, session_id: SessionId, user_id: UserId) -> StorePath:
        return self.session(session_id).child(Segment.PARTICIPANTS, user_id)

    def session_artifact(
        self, session_id: SessionId, artifact_id: ArtifactId,
    ) -> StorePath:
        return self.session(session_id).child(Segment.ARTIFACTS, artifact_id)

    # ─── Teams ───────────────────────────────────────────────────

    def team(self, team_id: TeamId) -> StorePath:
        return self.entity(EntityKind.TEAM, team_id)

    def team_field(self, team_id: TeamId, field: Enum) -> StorePath:
        return self.team(team_id).child(field)

    def team_session(self, team_id: TeamId) -> StorePath:
        return self.team(team_id).child(Segment.SESSION_ID)

    def team_member(self, team_id: TeamId, user_id: UserId) -> StorePath:
        return self.team(team_id).child(Segment.MEMBERS, user_id)

    # ─── Artifacts ───────────────────────────────────────────────

    def artifact(self, artifact_id: ArtifactId) -> StorePath:
        return self.entity(EntityKind.ARTIFACT, artifact_id)

    def artifact_field(self, artifact_id: ArtifactId, field: Enum) -> StorePath:
        return self.artifact(artifact_id).child(field)
