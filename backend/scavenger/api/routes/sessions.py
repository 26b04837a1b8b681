"""Session Routes: session attributes, team slots and offered artifacts."""

from fastapi import APIRouter, Depends, status

from scavenger.core.errors import NotFoundError
from scavenger.schemas.entities import (
    SessionCreate, SessionResponse, SessionTimes, SessionUpdate,
)
from scavenger.services.directories import Directories, get_directories

router = APIRouter(prefix="/api/v1/sessions", tags=["sessions"])


async def _session_or_404(dirs: Directories, session_id: str) -> SessionResponse:
    session = await dirs.sessions.get(session_id)
    if session is None:
        raise NotFoundError("Session", session_id)
    return SessionResponse.build(session_id, session)


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(body: SessionCreate, dirs: Directories = Depends(get_directories)):
    await dirs.sessions.create(body.session_id, body.creator_id)
    return await _session_or_404(dirs, body.session_id)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str, dirs: Directories = Depends(get_directories)):
    return await _session_or_404(dirs, session_id)


@router.patch("/{session_id}", response_model=SessionResponse)
async def update_session(
    session_id: str, body: SessionUpdate, dirs: Directories = Depends(get_directories),
):
    if body.session_name is not None:
        await dirs.sessions.set_name(session_id, body.session_name)
    if body.is_active is not None:
        await dirs.sessions.set_active(session_id, body.is_active)
    return await _session_or_404(dirs, session_id)


@router.put("/{session_id}/times", response_model=SessionResponse)
async def set_times(
    session_id: str, body: SessionTimes, dirs: Directories = Depends(get_directories),
):
    await dirs.sessions.set_times(session_id, body.start_time, body.end_time)
    return await _session_or_404(dirs, session_id)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: str, dirs: Directories = Depends(get_directories)):
    await dirs.sessions.delete(session_id)


@router.get("/{session_id}/participants")
async def list_participants(session_id: str, dirs: Directories = Depends(get_directories)):
    return {"participants": await dirs.sessions.list_participants(session_id)}


# ─── Teams ──────────────────────────────────────────────────────

@router.get("/{session_id}/teams")
async def list_teams(session_id: str, dirs: Directories = Depends(get_directories)):
    return {"teams": await dirs.sessions.list_teams(session_id)}


@router.put("/{session_id}/teams/{team_id}", status_code=status.HTTP_204_NO_CONTENT)
async def add_team(
    session_id: str, team_id: str, dirs: Directories = Depends(get_directories),
):
    await dirs.sessions.add_team(session_id, team_id)


@router.delete("/{session_id}/teams/{team_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_team(
    session_id: str, team_id: str, dirs: Directories = Depends(get_directories),
):
    await dirs.sessions.remove_team(session_id, team_id)


# ─── Artifacts ──────────────────────────────────────────────────

@router.get("/{session_id}/artifacts")
async def list_artifacts(session_id: str, dirs: Directories = Depends(get_directories)):
    return {"artifacts": await dirs.sessions.list_artifacts(session_id)}


@router.put("/{session_id}/artifacts/{artifact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def add_artifact(
    session_id: str, artifact_id: str, dirs: Directories = Depends(get_directories),
):
    await dirs.sessions.add_artifact(session_id, artifact_id)


@router.delete("/{session_id}/artifacts/{artifact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_artifact(
    session_id: str, artifact_id: str, dirs: Directories = Depends(get_directories),
):
    await dirs.sessions.remove_artifact(session_id, artifact_id)
