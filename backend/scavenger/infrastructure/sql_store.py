"""SQL Key-Value Store: KeyValueStore protocol over the kv_nodes leaf table.

Invariants:
    - Each protocol call runs in exactly one DB transaction (single-path atomicity,
      nothing more)
    - write(p, v) removes the old subtree at p and any leaf stored at an ancestor
      of p before inserting the leaves of v
    - Subtree matching compares an exact, case-sensitive path prefix (no LIKE:
      SQLite folds ASCII case there, and % or _ would be wildcards)
    - Driver errors surface as StoreError via DatabaseSessionManager
"""

import logging
from typing import Any

from sqlalchemy import delete, func, or_, select

from scavenger.core.errors import StoreError
from scavenger.infrastructure.database import DatabaseSessionManager
from scavenger.infrastructure.tree import (
    flatten, join_path, prune, split_path, unflatten,
)
from scavenger.models.kv_node import KvNode

logger = logging.getLogger(__name__)


def _subtree(parts: tuple[str, ...]):
    """WHERE clause selecting the leaf at parts and every leaf below it."""
    if not parts:
        return KvNode.path.is_not(None)
    path = join_path(parts)
    prefix = path + "/"
    return or_(
        KvNode.path == path,
        func.substr(KvNode.path, 1, len(prefix)) == prefix,
    )


def _ancestors(parts: tuple[str, ...]) -> list[str]:
    return [join_path(parts[:i]) for i in range(1, len(parts))]


class SqlKeyValueStore:
    """Durable tree store backed by SQLAlchemy (PostgreSQL or SQLite)."""

    def __init__(self, manager: DatabaseSessionManager):
        self.manager = manager

    async def exists(self, path: str) -> bool:
        parts = split_path(path)
        async with self.manager.session() as db:
            result = await db.execute(
                select(KvNode.path).where(_subtree(parts)).limit(1),
            )
            return result.first() is not None

    async def read(self, path: str) -> Any:
        parts = split_path(path)
        async with self.manager.session() as db:
            result = await db.execute(
                select(KvNode.path, KvNode.value)
                .where(_subtree(parts))
                .order_by(KvNode.path),
            )
            rows = result.all()
        return unflatten(parts, ((r.path, r.value) for r in rows))

    async def write(self, path: str, value: Any) -> None:
        parts = split_path(path)
        pruned = prune(value)
        if not parts and pruned is not None and not isinstance(pruned, dict):
            raise StoreError("root value must be a map", "write", path)
        async with self.manager.session() as db:
            await db.execute(
                delete(KvNode).where(_subtree(parts)),
                execution_options={"synchronize_session": False},
            )
            ancestors = _ancestors(parts)
            if ancestors:
                await db.execute(
                    delete(KvNode).where(KvNode.path.in_(ancestors)),
                    execution_options={"synchronize_session": False},
                )
            if pruned is not None:
                db.add_all(
                    KvNode(path=leaf_path, value=leaf)
                    for leaf_path, leaf in flatten(parts, pruned)
                )
            await db.commit()
        logger.debug("kv write", extra={"path": path})

    async def delete(self, path: str) -> None:
        parts = split_path(path)
        async with self.manager.session() as db:
            await db.execute(
                delete(KvNode).where(_subtree(parts)),
                execution_options={"synchronize_session": False},
            )
            await db.commit()
        logger.debug("kv delete", extra={"path": path})
