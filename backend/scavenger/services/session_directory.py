"""Session Directory: game instances, their team slots and offered artifacts.

Invariants:
    - sessions/s/teams/t exists iff teams/t/sessionId == s
    - A team is attached or detached only while it has no members
    - An artifact recorded as found by any participant cannot be withdrawn
      (found ratchet)
    - A session is deletable only with no participants and no teams

Design Decisions:
    - remove_artifact scans every participant's found set: the store has no
      reverse index from artifact to finders
    - add_artifact is idempotent; re-offering an artifact is not an error
"""

from typing import Any

from scavenger.core.domain_types import (
    ArtifactId, EntityKind, Millis, SessionField, SessionId, TeamId, UserId,
)
from scavenger.core.errors import ValidationError
from scavenger.core.paths import Segment, validate_key
from scavenger.core.records import Session
from scavenger.services.base_directory import BaseDirectory, coerce_field, mutation


class SessionDirectory(BaseDirectory):
    kind = EntityKind.SESSION

    async def get(self, session_id: SessionId) -> Session | None:
        return await self._load(EntityKind.SESSION, session_id)

    @mutation
    async def create(self, session_id: SessionId, creator_id: UserId) -> None:
        validate_key(creator_id, "creator_id")
        await self._create(session_id, Session.blank(creator_id))

    # ─── Attributes ──────────────────────────────────────────────

    @mutation
    async def set_field(self, session_id: SessionId, field: SessionField, value: Any) -> None:
        field = coerce_field(SessionField, field)
        await self._require(EntityKind.SESSION, session_id)
        await self._field_plan(session_id, field, value, f"set_{field.value}").commit()
        self._completed("set_field", session_id, path=field.value)

    async def set_name(self, session_id: SessionId, name: str) -> None:
        await self.set_field(session_id, SessionField.NAME, name)

    async def set_active(self, session_id: SessionId, is_active: bool) -> None:
        await self.set_field(session_id, SessionField.IS_ACTIVE, is_active)

    @mutation
    async def set_times(self, session_id: SessionId, start_time: Millis, end_time: Millis) -> None:
        for name, value in (("start_time", start_time), ("end_time", end_time)):
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValidationError(f"{name} must be epoch milliseconds", name)
        await self._require(EntityKind.SESSION, session_id)
        if start_time >= end_time:
            raise ValidationError("Start time must be before end time", "start_time")
        await (
            self.plan("set_times")
            .write(self.keys.session_field(session_id, Segment.START_TIME), start_time)
            .write(self.keys.session_field(session_id, Segment.END_TIME), end_time)
            .commit()
        )
        self._completed("set_times", session_id)

    # ─── Teams ───────────────────────────────────────────────────

    @mutation
    async def add_team(self, session_id: SessionId, team_id: TeamId) -> None:
        await self._require(EntityKind.SESSION, session_id)
        team = await self._require(EntityKind.TEAM, team_id)
        if team.session_id:
            raise self._reject(
                "add_team", session_id, "Team is already part of another session",
            )
        if team.members:
            raise self._reject(
                "add_team", session_id, "Team must be empty before adding to session",
            )
        plan = self.plan("add_team")
        self.links.link_team(plan, session_id, team_id)
        await plan.commit()
        self._completed("add_team", session_id, path=team_id)

    @mutation
    async def remove_team(self, session_id: SessionId, team_id: TeamId) -> None:
        session = await self._require(EntityKind.SESSION, session_id)
        if team_id not in session.teams:
            raise self._reject(
                "remove_team", session_id, "Team is not part of this session",
            )
        team = await self._require(EntityKind.TEAM, team_id)
        if team.members:
            raise self._reject(
                "remove_team", session_id,
                "Team must be empty before removing from session",
            )
        plan = self.plan("remove_team")
        self.links.unlink_team(plan, session_id, team_id)
        await plan.commit()
        self._completed("remove_team", session_id, path=team_id)

    # ─── Artifacts ───────────────────────────────────────────────

    @mutation
    async def add_artifact(self, session_id: SessionId, artifact_id: ArtifactId) -> None:
        await self._require(EntityKind.SESSION, session_id)
        await self._require(EntityKind.ARTIFACT, artifact_id)
        await (
            self.plan("add_artifact")
            .write(self.keys.session_artifact(session_id, artifact_id), True)
            .commit()
        )
        self._completed("add_artifact", session_id, path=artifact_id)

    @mutation
    async def remove_artifact(self, session_id: SessionId, artifact_id: ArtifactId) -> None:
        session = await self._require(EntityKind.SESSION, session_id)
        if artifact_id not in session.artifacts:
            raise self._reject(
                "remove_artifact", session_id, "Artifact is not part of this session",
            )
        for user_id in sorted(session.participants):
            if await self._read(self.keys.found_artifact(user_id, session_id, artifact_id)):
                raise self._reject(
                    "remove_artifact", session_id,
                    "Cannot remove artifact that has been found by users",
                )
        await (
            self.plan("remove_artifact")
            .delete(self.keys.session_artifact(session_id, artifact_id))
            .commit()
        )
        self._completed("remove_artifact", session_id, path=artifact_id)

    # ─── Lifecycle ───────────────────────────────────────────────

    @mutation
    async def delete(self, session_id: SessionId) -> None:
        session = await self._require(EntityKind.SESSION, session_id)
        if not session.is_empty:
            reason = (
                "Cannot delete session with active participants" if session.participants
                else "Cannot delete session with associated teams"
            )
            raise self._reject("delete", session_id, reason)
        await self._delete(session_id)

    async def list_teams(self, session_id: SessionId) -> list[TeamId]:
        session = await self._require(EntityKind.SESSION, session_id)
        return sorted(session.teams)

    async def list_participants(self, session_id: SessionId) -> list[UserId]:
        session = await self._require(EntityKind.SESSION, session_id)
        return sorted(session.participants)

    async def list_artifacts(self, session_id: SessionId) -> list[ArtifactId]:
        session = await self._require(EntityKind.SESSION, session_id)
        return sorted(session.artifacts)
