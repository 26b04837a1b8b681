"""In-Memory Key-Value Store: nested-dict tree implementing the KeyValueStore protocol.

Invariants:
    - Every call yields to the event loop once before touching the tree, so
      concurrent operations interleave exactly as they would against a remote store
    - read() and write() deep-copy; callers never share structure with the tree
    - Writing below a leaf replaces the leaf with a map
    - Removing the last child of a map removes the map (no empty maps persist)

Design Decisions:
    - Used by tests and by the `memory` store backend; no persistence across restarts
"""

import asyncio
import copy
from typing import Any

from scavenger.core.errors import StoreError
from scavenger.infrastructure.tree import prune, split_path


class InMemoryKeyValueStore:
    """Process-local tree store."""

    def __init__(self, initial: dict | None = None):
        self._root: dict[str, Any] = prune(initial) or {}

    async def exists(self, path: str) -> bool:
        await asyncio.sleep(0)
        return self._get(split_path(path)) is not None

    async def read(self, path: str) -> Any:
        await asyncio.sleep(0)
        return copy.deepcopy(self._get(split_path(path)))

    async def write(self, path: str, value: Any) -> None:
        await asyncio.sleep(0)
        parts = split_path(path)
        pruned = prune(value)
        if pruned is None:
            self._remove(parts)
            return
        if not parts:
            if not isinstance(pruned, dict):
                raise StoreError("root value must be a map", "write", path)
            self._root = pruned
            return
        node = self._root
        for seg in parts[:-1]:
            child = node.get(seg)
            if not isinstance(child, dict):
                child = {}
                node[seg] = child
            node = child
        node[parts[-1]] = pruned

    async def delete(self, path: str) -> None:
        await asyncio.sleep(0)
        self._remove(split_path(path))

    def dump(self) -> dict:
        """Synchronous deep copy of the whole tree (diagnostics and tests)."""
        return copy.deepcopy(self._root)

    def _get(self, parts: tuple[str, ...]) -> Any:
        node: Any = self._root
        for seg in parts:
            if not isinstance(node, dict) or seg not in node:
                return None
            node = node[seg]
        return node if node != {} else None

    def _remove(self, parts: tuple[str, ...]) -> None:
        if not parts:
            self._root = {}
            return
        trail = [self._root]
        for seg in parts[:-1]:
            node = trail[-1].get(seg)
            if not isinstance(node, dict):
                return
            trail.append(node)
        trail[-1].pop(parts[-1], None)
        # prune maps emptied by the removal, deepest first
        for depth in range(len(trail) - 1, 0, -1):
            if trail[depth]:
                break
            trail[depth - 1].pop(parts[depth - 1], None)
