"""Store Factory: build the configured KeyValueStore adapter from Settings."""

import logging

from scavenger.config import Settings
from scavenger.core.repository_protocols import KeyValueStore
from scavenger.infrastructure.database import DatabaseSessionManager
from scavenger.infrastructure.memory_store import InMemoryKeyValueStore
from scavenger.infrastructure.sql_store import SqlKeyValueStore

logger = logging.getLogger(__name__)


def build_store(settings: Settings) -> KeyValueStore:
    if settings.store_backend == "memory":
        logger.info("Using in-memory store (contents are lost on restart)")
        return InMemoryKeyValueStore()
    manager = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Using SQL store", extra={"operation": "build_store"})
    return SqlKeyValueStore(manager)
