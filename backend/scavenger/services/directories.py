"""Directories Facade: one store handle, one key space and one guard for all four directories.

Invariants:
    - Every directory built here shares the same store, KeySpace and guard
    - serialize=True: all mutations across all four directories run one at a
      time (in-process single-writer queue); reads are never blocked
    - Module-level `directories` is set once by init_directories() during app startup

Design Decisions:
    - The guard is an asyncio.Lock, so it only serializes callers in this
      process and event loop; cross-process writers need an external serializer
    - init/get pair mirrors the database manager singleton: FastAPI lifespan
      owns construction, routes receive it through Depends(get_directories)
"""

import asyncio

from scavenger.core.paths import KeySpace
from scavenger.core.repository_protocols import KeyValueStore
from scavenger.services.artifact_directory import ArtifactDirectory
from scavenger.services.integrity_audit import IntegrityAuditor
from scavenger.services.session_directory import SessionDirectory
from scavenger.services.team_directory import TeamDirectory
from scavenger.services.user_directory import UserDirectory


class Directories:
    """The four directories wired to one store."""

    def __init__(
        self, store: KeyValueStore, namespace: str = "", serialize: bool = True,
    ):
        self.store = store
        self.keys = KeySpace(namespace)
        self.guard = asyncio.Lock() if serialize else None
        shared = dict(keys=self.keys, guard=self.guard)
        self.users = UserDirectory(store, **shared)
        self.sessions = SessionDirectory(store, **shared)
        self.teams = TeamDirectory(store, **shared)
        self.artifacts = ArtifactDirectory(store, **shared)
        self.auditor = IntegrityAuditor(store, self.keys)

    async def audit(self):
        """Run the integrity audit, under the guard when serialized."""
        if self.guard is None:
            return await self.auditor.audit()
        async with self.guard:
            return await self.auditor.audit()


directories: Directories | None = None


def init_directories(store: KeyValueStore, namespace: str = "", serialize: bool = True):
    global directories
    directories = Directories(store, namespace=namespace, serialize=serialize)
    return directories


def get_directories() -> Directories:
    """FastAPI dependency: the process-wide Directories."""
    if directories is None:
        raise RuntimeError("Directories not initialized")
    return directories
