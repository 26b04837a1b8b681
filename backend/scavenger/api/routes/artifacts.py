"""Artifact Routes: collectible definitions and their location."""

from fastapi import APIRouter, Depends, status

from scavenger.core.errors import NotFoundError
from scavenger.schemas.entities import (
    ArtifactResponse, ArtifactUpdate, Coordinates, EntityCreate,
)
from scavenger.services.directories import Directories, get_directories

router = APIRouter(prefix="/api/v1/artifacts", tags=["artifacts"])

_ATTRIBUTE_SETTERS = {
    "name": "set_name",
    "description": "set_description",
    "location_hint": "set_location_hint",
    "image_url": "set_image_url",
    "audio_url": "set_audio_url",
    "is_challenge": "set_challenge_status",
}


async def _artifact_or_404(dirs: Directories, artifact_id: str) -> ArtifactResponse:
    artifact = await dirs.artifacts.get(artifact_id)
    if artifact is None:
        raise NotFoundError("Artifact", artifact_id)
    return ArtifactResponse.build(artifact_id, artifact)


@router.post("", response_model=ArtifactResponse, status_code=status.HTTP_201_CREATED)
async def create_artifact(body: EntityCreate, dirs: Directories = Depends(get_directories)):
    await dirs.artifacts.create(body.entity_id)
    return await _artifact_or_404(dirs, body.entity_id)


@router.get("/{artifact_id}", response_model=ArtifactResponse)
async def get_artifact(artifact_id: str, dirs: Directories = Depends(get_directories)):
    return await _artifact_or_404(dirs, artifact_id)


@router.patch("/{artifact_id}", response_model=ArtifactResponse)
async def update_artifact(
    artifact_id: str, body: ArtifactUpdate, dirs: Directories = Depends(get_directories),
):
    """Apply each field present in the body (null clears image/audio urls)."""
    for name, value in body.model_dump(exclude_unset=True).items():
        await getattr(dirs.artifacts, _ATTRIBUTE_SETTERS[name])(artifact_id, value)
    return await _artifact_or_404(dirs, artifact_id)


@router.get("/{artifact_id}/location")
async def get_location(artifact_id: str, dirs: Directories = Depends(get_directories)):
    latitude, longitude = await dirs.artifacts.get_location(artifact_id)
    return {"latitude": latitude, "longitude": longitude}


@router.put("/{artifact_id}/location", response_model=ArtifactResponse)
async def set_location(
    artifact_id: str, body: Coordinates, dirs: Directories = Depends(get_directories),
):
    await dirs.artifacts.set_coordinates(artifact_id, body.latitude, body.longitude)
    return await _artifact_or_404(dirs, artifact_id)


@router.delete("/{artifact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_artifact(artifact_id: str, dirs: Directories = Depends(get_directories)):
    await dirs.artifacts.delete(artifact_id)
