"""Team Directory: teams, their session attachment and their members.

Invariants:
    - add_member requires an attached team and a user already participating
      in that session without a team
    - Membership changes write all three pointers together (team members,
      session participant entry, user teamId) through the AssociationWriter
    - A team is deletable only when detached and empty

Design Decisions:
    - Team <-> session attachment is owned by SessionDirectory.add_team /
      remove_team; this directory only reads sessionId
"""

from scavenger.core.domain_types import (
    NO_TEAM, EntityKind, SessionId, TeamId, UserId,
)
from scavenger.core.errors import ValidationError
from scavenger.core.paths import Segment
from scavenger.core.records import Team
from scavenger.services.base_directory import BaseDirectory, mutation


class TeamDirectory(BaseDirectory):
    kind = EntityKind.TEAM

    async def get(self, team_id: TeamId) -> Team | None:
        return await self._load(EntityKind.TEAM, team_id)

    @mutation
    async def create(self, team_id: TeamId) -> None:
        await self._create(team_id, Team.blank())

    @mutation
    async def set_name(self, team_id: TeamId, name: str) -> None:
        await self._require(EntityKind.TEAM, team_id)
        if not isinstance(name, str):
            raise ValidationError("teamName expects str", "teamName")
        await (
            self.plan("set_name")
            .write(self.keys.team_field(team_id, Segment.TEAM_NAME), name)
            .commit()
        )
        self._completed("set_name", team_id)

    @mutation
    async def add_member(self, team_id: TeamId, user_id: UserId) -> None:
        team = await self._require(EntityKind.TEAM, team_id)
        if not team.session_id:
            raise self._reject(
                "add_member", team_id,
                "Team must be assigned to a session before adding members",
            )
        session_id = SessionId(team.session_id)
        entry = await self._read(self.keys.participant(session_id, user_id))
        if entry is None:
            raise self._reject(
                "add_member", team_id,
                "User must be part of the session before joining team",
            )
        if user_id in team.members:
            raise self._reject(
                "add_member", team_id, "User is already a member of this team",
            )
        if entry != NO_TEAM:
            raise self._reject(
                "add_member", team_id,
                "User is already on another team in this session",
            )
        plan = self.plan("add_member")
        self.links.assign_member(plan, user_id, session_id, team_id)
        await plan.commit()
        self._completed("add_member", team_id, path=user_id)

    @mutation
    async def remove_member(self, team_id: TeamId, user_id: UserId) -> None:
        team = await self._require(EntityKind.TEAM, team_id)
        if user_id not in team.members:
            raise self._reject(
                "remove_member", team_id, "User is not a member of this team",
            )
        plan = self.plan("remove_member")
        if team.session_id:
            self.links.unassign_member(plan, user_id, SessionId(team.session_id), team_id)
        else:
            plan.delete(self.keys.team_member(team_id, user_id))
        await plan.commit()
        self._completed("remove_member", team_id, path=user_id)

    @mutation
    async def delete(self, team_id: TeamId) -> None:
        team = await self._require(EntityKind.TEAM, team_id)
        if not team.is_detached:
            reason = (
                "Remove team from session before deletion" if team.session_id
                else "Remove all team members before deletion"
            )
            raise self._reject("delete", team_id, reason)
        await self._delete(team_id)

    async def list_members(self, team_id: TeamId) -> list[UserId]:
        team = await self._require(EntityKind.TEAM, team_id)
        return sorted(team.members)

    async def get_session(self, team_id: TeamId) -> SessionId | None:
        team = await self._require(EntityKind.TEAM, team_id)
        return team.session_id
