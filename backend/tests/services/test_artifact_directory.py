"""Artifact Directory: verifies attribute setters, location and guarded deletion."""

import pytest

from scavenger.core.domain_types import ArtifactField
from scavenger.core.errors import (
    AlreadyExistsError, InvalidStateError, NotFoundError, ValidationError,
)


async def test_create_writes_blank_artifact(dirs, store):
    await dirs.artifacts.create("a1")
    raw = await store.read("artifacts/a1")
    assert raw == {
        "name": "", "description": "", "locationHint": "",
        "latitude": 0.0, "longitude": 0.0, "isChallenge": False,
    }
    with pytest.raises(AlreadyExistsError):
        await dirs.artifacts.create("a1")


async def test_setters(dirs):
    await dirs.artifacts.create("a1")
    await dirs.artifacts.set_name("a1", "Bronze Owl")
    await dirs.artifacts.set_description("a1", "Above the library door")
    await dirs.artifacts.set_location_hint("a1", "Look up")
    await dirs.artifacts.set_image_url("a1", "https://img/owl.png")
    await dirs.artifacts.set_audio_url("a1", "https://audio/owl.mp3")
    await dirs.artifacts.set_challenge_status("a1", True)
    artifact = await dirs.artifacts.get("a1")
    assert artifact.name == "Bronze Owl"
    assert artifact.description == "Above the library door"
    assert artifact.location_hint == "Look up"
    assert artifact.image_url == "https://img/owl.png"
    assert artifact.audio_url == "https://audio/owl.mp3"
    assert artifact.is_challenge is True


async def test_coordinates_round_trip(dirs):
    await dirs.artifacts.create("a1")
    await dirs.artifacts.set_coordinates("a1", 48.8584, 2)
    assert await dirs.artifacts.get_location("a1") == (48.8584, 2.0)


async def test_coordinates_must_be_numbers(dirs):
    await dirs.artifacts.create("a1")
    with pytest.raises(ValidationError):
        await dirs.artifacts.set_coordinates("a1", "north", 2.0)


async def test_set_field_type_checked(dirs):
    await dirs.artifacts.create("a1")
    with pytest.raises(ValidationError):
        await dirs.artifacts.set_field("a1", ArtifactField.IS_CHALLENGE, 1)


async def test_missing_artifact(dirs):
    assert await dirs.artifacts.get("ghost") is None
    with pytest.raises(NotFoundError):
        await dirs.artifacts.set_name("ghost", "x")
    with pytest.raises(NotFoundError):
        await dirs.artifacts.get_location("ghost")
    with pytest.raises(NotFoundError):
        await dirs.artifacts.delete("ghost")


async def test_delete_blocked_while_any_session_offers_it(hunt):
    await hunt.sessions.create("s2", "u1")
    await hunt.sessions.add_artifact("s2", "a1")
    with pytest.raises(InvalidStateError, match="part of an active session"):
        await hunt.artifacts.delete("a1")
    await hunt.sessions.remove_artifact("s1", "a1")
    with pytest.raises(InvalidStateError):
        await hunt.artifacts.delete("a1")
    await hunt.sessions.remove_artifact("s2", "a1")
    await hunt.artifacts.delete("a1")
    assert await hunt.artifacts.get("a1") is None
