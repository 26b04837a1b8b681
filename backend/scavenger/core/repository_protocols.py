"""Boundary Protocols: the contract between the directories and the key-value store.

Invariants:
    - Core NEVER imports from infrastructure; adapters satisfy this Protocol structurally
    - Paths are slash-delimited addresses into one tree; every field is addressable
    - write(path, None) and delete(path) are equivalent
    - Empty maps are never materialized: after write(p, {}) exists(p) is False
    - No cross-path atomicity, no compare-and-swap, no server-side validation

Design Decisions:
    - Protocol over ABC: structural subtyping, adapters need no shared base class
    - Async in Protocol: every call is a suspension point for the caller
"""

from typing import Any, Protocol


class KeyValueStore(Protocol):
    """Path-addressed hierarchical store. Implemented by infrastructure/."""
    async def exists(self, path: str) -> bool: ...
    async def read(self, path: str) -> Any: ...
    async def write(self, path: str, value: Any) -> None: ...
    async def delete(self, path: str) -> None: ...
