"""Artifact Directory: collectible definitions and their descriptive attributes."""

from typing import Any

from scavenger.core.domain_types import ArtifactField, ArtifactId, EntityKind
from scavenger.core.errors import ValidationError
from scavenger.core.paths import Segment
from scavenger.core.records import Artifact, Session
from scavenger.services.base_directory import BaseDirectory, coerce_field, mutation


def _coordinate(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a number", name)
    return float(value)


class ArtifactDirectory(BaseDirectory):
    kind = EntityKind.ARTIFACT

    async def get(self, artifact_id: ArtifactId) -> Artifact | None:
        return await self._load(EntityKind.ARTIFACT, artifact_id)

    @mutation
    async def create(self, artifact_id: ArtifactId) -> None:
        await self._create(artifact_id, Artifact.blank())

    @mutation
    async def set_field(self, artifact_id: ArtifactId, field: ArtifactField, value: Any) -> None:
        field = coerce_field(ArtifactField, field)
        await self._require(EntityKind.ARTIFACT, artifact_id)
        await self._field_plan(artifact_id, field, value, f"set_{field.value}").commit()
        self._completed("set_field", artifact_id, path=field.value)

    async def set_name(self, artifact_id: ArtifactId, name: str) -> None:
        await self.set_field(artifact_id, ArtifactField.NAME, name)

    async def set_description(self, artifact_id: ArtifactId, description: str) -> None:
        await self.set_field(artifact_id, ArtifactField.DESCRIPTION, description)

    async def set_location_hint(self, artifact_id: ArtifactId, hint: str) -> None:
        await self.set_field(artifact_id, ArtifactField.LOCATION_HINT, hint)

    async def set_image_url(self, artifact_id: ArtifactId, url: str | None) -> None:
        await self.set_field(artifact_id, ArtifactField.IMAGE_URL, url)

    async def set_audio_url(self, artifact_id: ArtifactId, url: str | None) -> None:
        await self.set_field(artifact_id, ArtifactField.AUDIO_URL, url)

    async def set_challenge_status(self, artifact_id: ArtifactId, is_challenge: bool) -> None:
        await self.set_field(artifact_id, ArtifactField.IS_CHALLENGE, is_challenge)

    @mutation
    async def set_coordinates(self, artifact_id: ArtifactId, latitude: float, longitude: float) -> None:
        # Opaque payload: no range checks
        lat = _coordinate("latitude", latitude)
        lon = _coordinate("longitude", longitude)
        await self._require(EntityKind.ARTIFACT, artifact_id)
        await (
            self.plan("set_coordinates")
            .write(self.keys.artifact_field(artifact_id, Segment.LATITUDE), lat)
            .write(self.keys.artifact_field(artifact_id, Segment.LONGITUDE), lon)
            .commit()
        )
        self._completed("set_coordinates", artifact_id)

    async def get_location(self, artifact_id: ArtifactId) -> tuple[float, float]:
        artifact = await self._require(EntityKind.ARTIFACT, artifact_id)
        return artifact.latitude, artifact.longitude

    @mutation
    async def delete(self, artifact_id: ArtifactId) -> None:
        await self._require(EntityKind.ARTIFACT, artifact_id)
        sessions = await self._read(self.keys.collection(EntityKind.SESSION)) or {}
        for session_id, raw in sorted(sessions.items()):
            session = Session.from_store(raw, session_id)
            if session is not None and artifact_id in session.artifacts:
                raise self._reject(
                    "delete", artifact_id,
                    "Cannot delete artifact that is part of an active session",
                )
        await self._delete(artifact_id)
