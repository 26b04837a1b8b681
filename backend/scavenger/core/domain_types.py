"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, SessionId, TeamId, ArtifactId wrap str; ids are path segments
    - NO_TEAM ("") is the participant-index sentinel for "joined, no team yet"
    - Every settable scalar field is an Enum member: no raw field-name strings
      reach the store from outside this module

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums whose values are the persisted camelCase keys
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", str)
SessionId = NewType("SessionId", str)
TeamId = NewType("TeamId", str)
ArtifactId = NewType("ArtifactId", str)

# Epoch milliseconds
Millis = NewType("Millis", int)

NO_TEAM = ""

# Characters the hierarchical store refuses inside a single key
FORBIDDEN_KEY_CHARS = frozenset("/.#$[]")


# ─── Enums ───────────────────────────────────────────────────────

class EntityKind(str, Enum):
    """Top-level collections of the store, one per directory."""
    USER = "users"
    SESSION = "sessions"
    TEAM = "teams"
    ARTIFACT = "artifacts"

    @property
    def label(self) -> str:
        return {
            EntityKind.USER: "User",
            EntityKind.SESSION: "Session",
            EntityKind.TEAM: "Team",
            EntityKind.ARTIFACT: "Artifact",
        }[self]


class UserField(str, Enum):
    """Scalar user fields settable through UserDirectory.set_field."""
    USERNAME = "username"
    EMAIL = "email"
    PROFILE_PICTURE_URL = "profilePictureUrl"
    IS_ADMIN = "isAdmin"


class SessionField(str, Enum):
    """Scalar session fields settable through SessionDirectory.set_field."""
    NAME = "sessionName"
    IS_ACTIVE = "isActive"


class ArtifactField(str, Enum):
    """Scalar artifact fields settable through ArtifactDirectory.set_field."""
    NAME = "name"
    DESCRIPTION = "description"
    LOCATION_HINT = "locationHint"
    IMAGE_URL = "imageUrl"
    AUDIO_URL = "audioUrl"
    IS_CHALLENGE = "isChallenge"


# Fields that may be cleared by setting them to None
OPTIONAL_FIELDS: frozenset[Enum] = frozenset({
    UserField.PROFILE_PICTURE_URL,
    ArtifactField.IMAGE_URL,
    ArtifactField.AUDIO_URL,
})

# Expected python type per settable field
FIELD_TYPES: dict[Enum, type] = {
    UserField.USERNAME: str,
    UserField.EMAIL: str,
    UserField.PROFILE_PICTURE_URL: str,
    UserField.IS_ADMIN: bool,
    SessionField.NAME: str,
    SessionField.IS_ACTIVE: bool,
    ArtifactField.NAME: str,
    ArtifactField.DESCRIPTION: str,
    ArtifactField.LOCATION_HINT: str,
    ArtifactField.IMAGE_URL: str,
    ArtifactField.AUDIO_URL: str,
    ArtifactField.IS_CHALLENGE: bool,
}
