"""Entity Schemas: request and response bodies for the directory routes.

Invariants:
    - Ids arriving in bodies are checked against the store key rules by the
      directories themselves (ValidationError, 400)
    - Response models mirror core/records.py in snake_case; the store's
      camelCase names stay on the persistence side

Design Decisions:
    - Strict primitive types (StrictInt, StrictBool): "1" is not a point total
      and "true" is not a flag
"""

from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt

from scavenger.core.records import Artifact, Session, Team, User


# ─── Creation ───────────────────────────────────────────────────

class EntityCreate(BaseModel):
    """Create a user, team or artifact."""
    entity_id: str = Field(min_length=1, max_length=256, alias="id")


class SessionCreate(BaseModel):
    session_id: str = Field(min_length=1, max_length=256, alias="id")
    creator_id: str = Field(min_length=1, max_length=256)


# ─── Attribute updates ──────────────────────────────────────────

class UserProfileUpdate(BaseModel):
    """Partial profile update; only fields present are written."""
    username: str | None = Field(None, max_length=200)
    email: str | None = Field(None, max_length=320)
    profile_picture_url: str | None = Field(None, max_length=2048)
    is_admin: StrictBool | None = None


class CurrentSessionUpdate(BaseModel):
    session_id: str | None = None


class PointsUpdate(BaseModel):
    points: StrictInt


class SessionUpdate(BaseModel):
    session_name: str | None = Field(None, max_length=200)
    is_active: StrictBool | None = None


class SessionTimes(BaseModel):
    start_time: StrictInt
    end_time: StrictInt


class TeamUpdate(BaseModel):
    team_name: str = Field(max_length=200)


class ArtifactUpdate(BaseModel):
    name: str | None = Field(None, max_length=200)
    description: str | None = Field(None, max_length=5000)
    location_hint: str | None = Field(None, max_length=1000)
    image_url: str | None = Field(None, max_length=2048)
    audio_url: str | None = Field(None, max_length=2048)
    is_challenge: StrictBool | None = None


class Coordinates(BaseModel):
    latitude: StrictFloat | StrictInt
    longitude: StrictFloat | StrictInt


# ─── Association bodies ─────────────────────────────────────────

class SessionRef(BaseModel):
    session_id: str = Field(min_length=1, max_length=256)


class TeamRef(BaseModel):
    team_id: str = Field(min_length=1, max_length=256)


class ArtifactRef(BaseModel):
    artifact_id: str = Field(min_length=1, max_length=256)


class MemberRef(BaseModel):
    user_id: str = Field(min_length=1, max_length=256)


# ─── Responses ──────────────────────────────────────────────────

class MembershipResponse(BaseModel):
    team_id: str | None
    points: int
    found_artifacts: list[str]


class UserResponse(BaseModel):
    id: str
    username: str
    email: str
    profile_picture_url: str | None
    current_session: str | None
    is_admin: bool
    created_at: int | None
    updated_at: int | None
    sessions_joined: dict[str, MembershipResponse]

    @classmethod
    def build(cls, user_id: str, user: User) -> "UserResponse":
        return cls(
            id=user_id,
            username=user.username,
            email=user.email,
            profile_picture_url=user.profile_picture_url,
            current_session=user.current_session,
            is_admin=user.is_admin,
            created_at=user.created_at,
            updated_at=user.updated_at,
            sessions_joined={
                sid: MembershipResponse(
                    team_id=m.team_id, points=m.points,
                    found_artifacts=sorted(m.found_artifacts),
                )
                for sid, m in user.sessions_joined.items()
            },
        )


class SessionResponse(BaseModel):
    id: str
    session_name: str
    creator_id: str
    start_time: int
    end_time: int
    is_active: bool
    teams: list[str]
    participants: dict[str, str | None]
    artifacts: list[str]

    @classmethod
    def build(cls, session_id: str, session: Session) -> "SessionResponse":
        return cls(
            id=session_id,
            session_name=session.session_name,
            creator_id=session.creator_id,
            start_time=session.start_time,
            end_time=session.end_time,
            is_active=session.is_active,
            teams=sorted(session.teams),
            # "" (joined, no team) is surfaced as null
            participants={u: (t or None) for u, t in session.participants.items()},
            artifacts=sorted(session.artifacts),
        )


class TeamResponse(BaseModel):
    id: str
    team_name: str
    session_id: str | None
    members: list[str]

    @classmethod
    def build(cls, team_id: str, team: Team) -> "TeamResponse":
        return cls(
            id=team_id, team_name=team.team_name,
            session_id=team.session_id, members=sorted(team.members),
        )


class ArtifactResponse(BaseModel):
    id: str
    name: str
    description: str
    location_hint: str
    latitude: float
    longitude: float
    image_url: str | None
    audio_url: str | None
    is_challenge: bool

    @classmethod
    def build(cls, artifact_id: str, artifact: Artifact) -> "ArtifactResponse":
        return cls(id=artifact_id, **artifact.model_dump(by_alias=False))
