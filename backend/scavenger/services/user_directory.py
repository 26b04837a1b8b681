"""User Directory: player lifecycle, session membership, team placement and finds.

Invariants:
    - users/u/sessionsJoined/s exists iff sessions/s/participants/u exists
    - A membership with a teamId cannot be left; unassign first
    - currentSession, when set, is a key of sessionsJoined
    - A found artifact must be offered by the session when recorded
    - Every mutation refreshes updatedAt
    - A user is deletable only with no session memberships

Design Decisions:
    - assign_team is a move: an existing team in the same session is left in the
      same write plan, so the user is never on two teams at once
    - Points are overwritten as given (no clamping); non-int is a ValidationError
"""

from typing import Any

from scavenger.core.domain_types import (
    EntityKind, SessionId, TeamId, UserField, UserId, ArtifactId,
)
from scavenger.core.errors import ValidationError
from scavenger.core.paths import Segment
from scavenger.core.records import Membership, User
from scavenger.services.base_directory import BaseDirectory, coerce_field, mutation
from scavenger.services.unit_of_work import WritePlan


class UserDirectory(BaseDirectory):
    kind = EntityKind.USER

    async def get(self, user_id: UserId) -> User | None:
        return await self._load(EntityKind.USER, user_id)

    @mutation
    async def create(self, user_id: UserId) -> None:
        await self._create(user_id, User.blank(self._clock()))

    # ─── Profile fields ──────────────────────────────────────────

    @mutation
    async def set_field(self, user_id: UserId, field: UserField, value: Any) -> None:
        field = coerce_field(UserField, field)
        await self._require(EntityKind.USER, user_id)
        plan = self._field_plan(user_id, field, value, f"set_{field.value}")
        await self._touch(plan, user_id).commit()
        self._completed("set_field", user_id, path=field.value)

    async def set_username(self, user_id: UserId, username: str) -> None:
        await self.set_field(user_id, UserField.USERNAME, username)

    async def set_email(self, user_id: UserId, email: str) -> None:
        await self.set_field(user_id, UserField.EMAIL, email)

    async def set_profile_picture(self, user_id: UserId, url: str | None) -> None:
        await self.set_field(user_id, UserField.PROFILE_PICTURE_URL, url)

    async def set_admin_status(self, user_id: UserId, is_admin: bool) -> None:
        await self.set_field(user_id, UserField.IS_ADMIN, is_admin)

    @mutation
    async def set_current_session(self, user_id: UserId, session_id: SessionId | None) -> None:
        user = await self._require(EntityKind.USER, user_id)
        if session_id and user.membership(session_id) is None:
            raise self._reject(
                "set_current_session", user_id, "User is not part of this session",
            )
        plan = self.plan("set_current_session").write(
            self.keys.user_field(user_id, Segment.CURRENT_SESSION), session_id or None,
        )
        await self._touch(plan, user_id).commit()
        self._completed("set_current_session", user_id)

    # ─── Session membership ──────────────────────────────────────

    @mutation
    async def join_session(self, user_id: UserId, session_id: SessionId) -> None:
        user = await self._require(EntityKind.USER, user_id)
        await self._require(EntityKind.SESSION, session_id)
        if user.membership(session_id) is not None:
            raise self._reject(
                "join_session", user_id, "User is already part of this session",
            )
        plan = self.plan("join_session")
        self.links.join_session(plan, user_id, session_id)
        await self._touch(plan, user_id).commit()
        self._completed("join_session", user_id, path=session_id)

    @mutation
    async def leave_session(self, user_id: UserId, session_id: SessionId) -> None:
        user = await self._require(EntityKind.USER, user_id)
        membership = self._membership_of(user, user_id, session_id, "leave_session")
        if membership.team_id:
            raise self._reject(
                "leave_session", user_id,
                "Remove user from team first before removing from session",
            )
        plan = self.plan("leave_session")
        self.links.leave_session(plan, user_id, session_id)
        if user.current_session == session_id:
            plan.delete(self.keys.user_field(user_id, Segment.CURRENT_SESSION))
        await self._touch(plan, user_id).commit()
        self._completed("leave_session", user_id, path=session_id)

    # ─── Team placement ──────────────────────────────────────────

    @mutation
    async def assign_team(self, user_id: UserId, session_id: SessionId, team_id: TeamId) -> None:
        user = await self._require(EntityKind.USER, user_id)
        membership = self._membership_of(user, user_id, session_id, "assign_team")
        team = await self._require(EntityKind.TEAM, team_id)
        if team.session_id != session_id:
            raise self._reject(
                "assign_team", user_id, "Team does not belong to this session",
            )
        plan = self.plan("assign_team")
        self.links.assign_member(
            plan, user_id, session_id, team_id, previous_team_id=membership.team_id,
        )
        await self._touch(plan, user_id).commit()
        self._completed("assign_team", user_id, path=f"{session_id}/{team_id}")

    @mutation
    async def unassign_team(self, user_id: UserId, session_id: SessionId) -> None:
        user = await self._require(EntityKind.USER, user_id)
        membership = self._membership_of(user, user_id, session_id, "unassign_team")
        if not membership.team_id:
            raise self._reject(
                "unassign_team", user_id,
                "User is not part of any team in this session",
            )
        plan = self.plan("unassign_team")
        self.links.unassign_member(plan, user_id, session_id, membership.team_id)
        await self._touch(plan, user_id).commit()
        self._completed("unassign_team", user_id, path=session_id)

    # ─── Found artifacts and points ──────────────────────────────

    @mutation
    async def record_found(
        self, user_id: UserId, session_id: SessionId, artifact_id: ArtifactId,
    ) -> None:
        user = await self._require(EntityKind.USER, user_id)
        self._membership_of(user, user_id, session_id, "record_found")
        if not await self._exists(self.keys.session_artifact(session_id, artifact_id)):
            raise self._reject(
                "record_found", user_id, "Artifact is not part of this session",
            )
        plan = self.plan("record_found")
        self.links.record_found(plan, user_id, session_id, artifact_id)
        await self._touch(plan, user_id).commit()
        self._completed("record_found", user_id, path=f"{session_id}/{artifact_id}")

    @mutation
    async def unrecord_found(
        self, user_id: UserId, session_id: SessionId, artifact_id: ArtifactId,
    ) -> None:
        user = await self._require(EntityKind.USER, user_id)
        membership = self._membership_of(user, user_id, session_id, "unrecord_found")
        if artifact_id not in membership.found_artifacts:
            raise self._reject(
                "unrecord_found", user_id, "Artifact is not in user's found artifacts",
            )
        plan = self.plan("unrecord_found")
        self.links.unrecord_found(plan, user_id, session_id, artifact_id)
        await self._touch(plan, user_id).commit()
        self._completed("unrecord_found", user_id, path=f"{session_id}/{artifact_id}")

    @mutation
    async def set_points(self, user_id: UserId, session_id: SessionId, value: int) -> None:
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValidationError("points must be an integer", "points")
        user = await self._require(EntityKind.USER, user_id)
        self._membership_of(user, user_id, session_id, "set_points")
        plan = self.plan("set_points").write(
            self.keys.membership_points(user_id, session_id), value,
        )
        await self._touch(plan, user_id).commit()
        self._completed("set_points", user_id, path=session_id)

    # ─── Lifecycle ───────────────────────────────────────────────

    @mutation
    async def delete(self, user_id: UserId) -> None:
        user = await self._require(EntityKind.USER, user_id)
        if user.sessions_joined:
            raise self._reject(
                "delete", user_id,
                "User still has session associations. Remove from all sessions first",
            )
        await self._delete(user_id)

    async def list_sessions(self, user_id: UserId) -> list[SessionId]:
        user = await self._require(EntityKind.USER, user_id)
        return sorted(user.sessions_joined)

    # ─── Helpers ─────────────────────────────────────────────────

    def _touch(self, plan: WritePlan, user_id: UserId) -> WritePlan:
        return plan.write(self.keys.user_field(user_id, Segment.UPDATED_AT), self._clock())

    def _membership_of(
        self, user: User, user_id: UserId, session_id: SessionId, operation: str,
    ) -> Membership:
        membership = user.membership(session_id)
        if membership is None:
            raise self._reject(operation, user_id, "User is not part of this session")
        return membership
