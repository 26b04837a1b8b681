"""API test fixtures: FastAPI app over a fresh in-memory store.

Invariants:
    - get_directories dependency overridden per test; the lifespan is not run
    - Every test gets its own store, so route tests never share state
"""

import pytest
from httpx import ASGITransport, AsyncClient

from scavenger.infrastructure.memory_store import InMemoryKeyValueStore
from scavenger.main import app
from scavenger.services.directories import Directories, get_directories


@pytest.fixture
def api_dirs():
    return Directories(InMemoryKeyValueStore())


@pytest.fixture
async def client(api_dirs):
    app.dependency_overrides[get_directories] = lambda: api_dirs
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
