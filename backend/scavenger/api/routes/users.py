"""User Routes: profile, session membership, team placement and finds.

Invariants:
    - Routes are thin: validate the body, call one directory operation, shape the response
    - Domain errors propagate to the global ScavengerError handler (never caught here)
"""

from fastapi import APIRouter, Depends, status

from scavenger.core.errors import NotFoundError
from scavenger.schemas.entities import (
    CurrentSessionUpdate, EntityCreate, PointsUpdate, TeamRef, UserProfileUpdate,
    UserResponse,
)
from scavenger.services.directories import Directories, get_directories

router = APIRouter(prefix="/api/v1/users", tags=["users"])

_PROFILE_SETTERS = {
    "username": "set_username",
    "email": "set_email",
    "profile_picture_url": "set_profile_picture",
    "is_admin": "set_admin_status",
}


async def _user_or_404(dirs: Directories, user_id: str) -> UserResponse:
    user = await dirs.users.get(user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return UserResponse.build(user_id, user)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(body: EntityCreate, dirs: Directories = Depends(get_directories)):
    await dirs.users.create(body.entity_id)
    return await _user_or_404(dirs, body.entity_id)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, dirs: Directories = Depends(get_directories)):
    return await _user_or_404(dirs, user_id)


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str, body: UserProfileUpdate, dirs: Directories = Depends(get_directories),
):
    """Apply each field present in the body (null clears optional fields)."""
    for name, value in body.model_dump(exclude_unset=True).items():
        await getattr(dirs.users, _PROFILE_SETTERS[name])(user_id, value)
    return await _user_or_404(dirs, user_id)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: str, dirs: Directories = Depends(get_directories)):
    await dirs.users.delete(user_id)


@router.put("/{user_id}/current-session", response_model=UserResponse)
async def set_current_session(
    user_id: str, body: CurrentSessionUpdate, dirs: Directories = Depends(get_directories),
):
    await dirs.users.set_current_session(user_id, body.session_id)
    return await _user_or_404(dirs, user_id)


# ─── Session membership ─────────────────────────────────────────

@router.get("/{user_id}/sessions")
async def list_user_sessions(user_id: str, dirs: Directories = Depends(get_directories)):
    return {"sessions": await dirs.users.list_sessions(user_id)}


@router.put("/{user_id}/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def join_session(
    user_id: str, session_id: str, dirs: Directories = Depends(get_directories),
):
    await dirs.users.join_session(user_id, session_id)


@router.delete("/{user_id}/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def leave_session(
    user_id: str, session_id: str, dirs: Directories = Depends(get_directories),
):
    await dirs.users.leave_session(user_id, session_id)


@router.put("/{user_id}/sessions/{session_id}/team", status_code=status.HTTP_204_NO_CONTENT)
async def assign_team(
    user_id: str, session_id: str, body: TeamRef,
    dirs: Directories = Depends(get_directories),
):
    await dirs.users.assign_team(user_id, session_id, body.team_id)


@router.delete("/{user_id}/sessions/{session_id}/team", status_code=status.HTTP_204_NO_CONTENT)
async def unassign_team(
    user_id: str, session_id: str, dirs: Directories = Depends(get_directories),
):
    await dirs.users.unassign_team(user_id, session_id)


@router.put("/{user_id}/sessions/{session_id}/points", status_code=status.HTTP_204_NO_CONTENT)
async def set_points(
    user_id: str, session_id: str, body: PointsUpdate,
    dirs: Directories = Depends(get_directories),
):
    await dirs.users.set_points(user_id, session_id, body.points)


@router.put(
    "/{user_id}/sessions/{session_id}/found/{artifact_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def record_found(
    user_id: str, session_id: str, artifact_id: str,
    dirs: Directories = Depends(get_directories),
):
    await dirs.users.record_found(user_id, session_id, artifact_id)


@router.delete(
    "/{user_id}/sessions/{session_id}/found/{artifact_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def unrecord_found(
    user_id: str, session_id: str, artifact_id: str,
    dirs: Directories = Depends(get_directories),
):
    await dirs.users.unrecord_found(user_id, session_id, artifact_id)
