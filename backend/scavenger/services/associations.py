"""Association Writer: the one place paired pointers are written.

Invariants:
    - Every method plans BOTH (or all three) sides of an association into the
      given WritePlan; no directory writes another entity's pointer fields itself
    - Planning only: no reads, no validation, no IO (preconditions are the
      calling directory's job)
    - Team membership always moves three pointers together:
      users/u/sessionsJoined/s/teamId, teams/t/members/u, sessions/s/participants/u
"""

from scavenger.core.domain_types import (
    NO_TEAM, ArtifactId, SessionId, TeamId, UserId,
)
from scavenger.core.paths import KeySpace
from scavenger.core.records import Membership
from scavenger.services.unit_of_work import WritePlan


class AssociationWriter:
    """Plans the writes for every cross-entity link."""

    def __init__(self, keys: KeySpace):
        self.keys = keys

    # ─── user <-> session ────────────────────────────────────────

    def join_session(self, plan: WritePlan, user_id: UserId, session_id: SessionId) -> None:
        plan.write(self.keys.membership(user_id, session_id), Membership().to_store())
        plan.write(self.keys.participant(session_id, user_id), NO_TEAM)

    def leave_session(self, plan: WritePlan, user_id: UserId, session_id: SessionId) -> None:
        plan.delete(self.keys.membership(user_id, session_id))
        plan.delete(self.keys.participant(session_id, user_id))

    # ─── team <-> session ────────────────────────────────────────

    def link_team(self, plan: WritePlan, session_id: SessionId, team_id: TeamId) -> None:
        plan.write(self.keys.session_team(session_id, team_id), True)
        plan.write(self.keys.team_session(team_id), session_id)

    def unlink_team(self, plan: WritePlan, session_id: SessionId, team_id: TeamId) -> None:
        plan.delete(self.keys.session_team(session_id, team_id))
        plan.delete(self.keys.team_session(team_id))

    # ─── user <-> team (within a session) ────────────────────────

    def assign_member(
        self,
        plan: WritePlan,
        user_id: UserId,
        session_id: SessionId,
        team_id: TeamId,
        previous_team_id: TeamId | None = None,
    ) -> None:
        """Put user on team_id, first leaving previous_team_id if it differs."""
        if previous_team_id and previous_team_id != team_id:
            plan.delete(self.keys.team_member(previous_team_id, user_id))
        plan.write(self.keys.membership_team(user_id, session_id), team_id)
        plan.write(self.keys.team_member(team_id, user_id), True)
        plan.write(self.keys.participant(session_id, user_id), team_id)

    def unassign_member(
        self, plan: WritePlan, user_id: UserId, session_id: SessionId, team_id: TeamId,
    ) -> None:
        plan.delete(self.keys.team_member(team_id, user_id))
        plan.delete(self.keys.membership_team(user_id, session_id))
        plan.write(self.keys.participant(session_id, user_id), NO_TEAM)

    # ─── found artifacts ─────────────────────────────────────────

    def record_found(
        self, plan: WritePlan, user_id: UserId, session_id: SessionId, artifact_id: ArtifactId,
    ) -> None:
        plan.write(self.keys.found_artifact(user_id, session_id, artifact_id), True)

    def unrecord_found(
        self, plan: WritePlan, user_id: UserId, session_id: SessionId, artifact_id: ArtifactId,
    ) -> None:
        plan.delete(self.keys.found_artifact(user_id, session_id, artifact_id))
