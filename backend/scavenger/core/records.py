"""Entity Records: closed, typed shapes for the four stored entities.

Invariants:
    - Every record has a fixed field set; unknown stored keys are ignored on read
    - Missing or null collections parse as empty (the store never materializes
      empty maps, so absence and emptiness are the same state)
    - Sets are persisted as {id: true} maps; the NO_TEAM sentinel and a missing
      teamId both parse to "no team"
    - from_store() is the only way raw payloads become records; malformed payloads
      raise InvalidStateError(code=MALFORMED_RECORD)

Design Decisions:
    - pydantic models with camelCase aliases: python names in code, stored names on disk
    - blank() constructors produce exactly what create() persists
"""

from typing import Any

from pydantic import (
    BaseModel, ConfigDict, Field, field_serializer, field_validator,
)
from pydantic import ValidationError as PydanticValidationError

from scavenger.core.domain_types import NO_TEAM, Millis
from scavenger.core.errors import InvalidStateError


def parse_id_set(value: Any) -> set[str]:
    """Read a stored {id: true} map (or a list of ids) into a set."""
    if not value:
        return set()
    if isinstance(value, dict):
        return {str(k) for k, v in value.items() if v}
    if isinstance(value, (list, tuple, set, frozenset)):
        return {str(v) for v in value if v is not None}
    raise ValueError("expected a map of ids")


def id_map(ids: set[str]) -> dict[str, bool]:
    return {i: True for i in sorted(ids)}


def _blank_to_none(value: Any) -> Any:
    return None if value == NO_TEAM else value


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @classmethod
    def from_store(cls, raw: Any, entity_id: str = "?"):
        """Validate a raw store payload into a record."""
        if raw is None:
            return None
        try:
            return cls.model_validate(raw)
        except PydanticValidationError as e:
            raise InvalidStateError(
                f"Stored {cls.__name__} '{entity_id}' is malformed: "
                f"{e.error_count()} invalid field(s)",
                code="MALFORMED_RECORD",
            ) from e

    def to_store(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class Membership(_Record):
    """One entry of User.sessionsJoined."""
    team_id: str | None = Field(None, alias="teamId")
    points: int = 0
    found_artifacts: set[str] = Field(default_factory=set, alias="foundArtifacts")

    @field_validator("team_id", mode="before")
    @classmethod
    def parse_team(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("found_artifacts", mode="before")
    @classmethod
    def parse_found(cls, v: Any) -> set[str]:
        return parse_id_set(v)

    @field_serializer("found_artifacts")
    def dump_found(self, v: set[str]) -> dict[str, bool]:
        return id_map(v)


class User(_Record):
    """A player and their per-session membership records."""
    username: str = ""
    email: str = ""
    profile_picture_url: str | None = Field(None, alias="profilePictureUrl")
    current_session: str | None = Field(None, alias="currentSession")
    sessions_joined: dict[str, Membership] = Field(
        default_factory=dict, alias="sessionsJoined",
    )
    is_admin: bool = Field(False, alias="isAdmin")
    created_at: int | None = Field(None, alias="createdAt")
    updated_at: int | None = Field(None, alias="updatedAt")

    @field_validator("current_session", mode="before")
    @classmethod
    def parse_current(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("sessions_joined", mode="before")
    @classmethod
    def parse_sessions(cls, v: Any) -> dict:
        if not v:
            return {}
        if not isinstance(v, dict):
            raise ValueError("sessionsJoined must be a map")
        # a bare `true` leaf still means "member, nothing recorded yet"
        return {k: (m if isinstance(m, dict) else {}) for k, m in v.items() if m}

    @classmethod
    def blank(cls, now: Millis) -> "User":
        return cls(created_at=now, updated_at=now)

    def membership(self, session_id: str) -> Membership | None:
        return self.sessions_joined.get(session_id)

    def team_in(self, session_id: str) -> str | None:
        m = self.membership(session_id)
        return m.team_id if m else None


class Session(_Record):
    """A game instance: its teams, participant index and offered artifacts."""
    session_name: str = Field("", alias="sessionName")
    creator_id: str = Field("", alias="creatorId")
    start_time: int = Field(0, alias="startTime")
    end_time: int = Field(0, alias="endTime")
    is_active: bool = Field(False, alias="isActive")
    teams: set[str] = Field(default_factory=set)
    participants: dict[str, str] = Field(default_factory=dict)
    artifacts: set[str] = Field(default_factory=set)

    @field_validator("teams", "artifacts", mode="before")
    @classmethod
    def parse_sets(cls, v: Any) -> set[str]:
        return parse_id_set(v)

    @field_validator("participants", mode="before")
    @classmethod
    def parse_participants(cls, v: Any) -> dict:
        if not v:
            return {}
        if not isinstance(v, dict):
            raise ValueError("participants must be a map")
        return {k: (t if isinstance(t, str) else NO_TEAM) for k, t in v.items()}

    @field_serializer("teams", "artifacts")
    def dump_sets(self, v: set[str]) -> dict[str, bool]:
        return id_map(v)

    @classmethod
    def blank(cls, creator_id: str) -> "Session":
        return cls(creator_id=creator_id)

    @property
    def is_empty(self) -> bool:
        return not self.participants and not self.teams


class Team(_Record):
    """A group of players attached to at most one session."""
    team_name: str = Field("", alias="teamName")
    session_id: str | None = Field(None, alias="sessionId")
    members: set[str] = Field(default_factory=set)

    @field_validator("session_id", mode="before")
    @classmethod
    def parse_session(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("members", mode="before")
    @classmethod
    def parse_members(cls, v: Any) -> set[str]:
        return parse_id_set(v)

    @field_serializer("members")
    def dump_members(self, v: set[str]) -> dict[str, bool]:
        return id_map(v)

    @classmethod
    def blank(cls) -> "Team":
        return cls()

    @property
    def is_detached(self) -> bool:
        return self.session_id is None and not self.members


class Artifact(_Record):
    """A collectible definition. Coordinates are opaque payload."""
    name: str = ""
    description: str = ""
    location_hint: str = Field("", alias="locationHint")
    latitude: float = 0.0
    longitude: float = 0.0
    image_url: str | None = Field(None, alias="imageUrl")
    audio_url: str | None = Field(None, alias="audioUrl")
    is_challenge: bool = Field(False, alias="isChallenge")

    @classmethod
    def blank(cls) -> "Artifact":
        return cls()
