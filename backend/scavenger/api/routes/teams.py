"""Team Routes: team naming and membership."""

from fastapi import APIRouter, Depends, status

from scavenger.core.errors import NotFoundError
from scavenger.schemas.entities import EntityCreate, TeamResponse, TeamUpdate
from scavenger.services.directories import Directories, get_directories

router = APIRouter(prefix="/api/v1/teams", tags=["teams"])


async def _team_or_404(dirs: Directories, team_id: str) -> TeamResponse:
    team = await dirs.teams.get(team_id)
    if team is None:
        raise NotFoundError("Team", team_id)
    return TeamResponse.build(team_id, team)


@router.post("", response_model=TeamResponse, status_code=status.HTTP_201_CREATED)
async def create_team(body: EntityCreate, dirs: Directories = Depends(get_directories)):
    await dirs.teams.create(body.entity_id)
    return await _team_or_404(dirs, body.entity_id)


@router.get("/{team_id}", response_model=TeamResponse)
async def get_team(team_id: str, dirs: Directories = Depends(get_directories)):
    return await _team_or_404(dirs, team_id)


@router.patch("/{team_id}", response_model=TeamResponse)
async def update_team(
    team_id: str, body: TeamUpdate, dirs: Directories = Depends(get_directories),
):
    await dirs.teams.set_name(team_id, body.team_name)
    return await _team_or_404(dirs, team_id)


@router.delete("/{team_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_team(team_id: str, dirs: Directories = Depends(get_directories)):
    await dirs.teams.delete(team_id)


@router.get("/{team_id}/session")
async def get_team_session(team_id: str, dirs: Directories = Depends(get_directories)):
    return {"session_id": await dirs.teams.get_session(team_id)}


@router.get("/{team_id}/members")
async def list_members(team_id: str, dirs: Directories = Depends(get_directories)):
    return {"members": await dirs.teams.list_members(team_id)}


@router.put("/{team_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def add_member(
    team_id: str, user_id: str, dirs: Directories = Depends(get_directories),
):
    await dirs.teams.add_member(team_id, user_id)


@router.delete("/{team_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    team_id: str, user_id: str, dirs: Directories = Depends(get_directories),
):
    await dirs.teams.remove_member(team_id, user_id)
