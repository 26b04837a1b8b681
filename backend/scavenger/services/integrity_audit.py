"""Integrity Audit: read the whole store and report broken cross-entity pointers.

Invariants:
    - Read-only: never writes, never repairs
    - All reasoning lives in core/invariants.py (pure); this module only does IO

Design Decisions:
    - Reads each top-level collection once; the snapshot is not point-in-time
      consistent under concurrent writers, so a violation seen mid-write may be
      transient. Run it with writers quiesced (or under the shared guard) for a
      definitive answer.
"""

import logging

from scavenger.core.domain_types import EntityKind
from scavenger.core.invariants import IntegrityViolation, StoreSnapshot, check_integrity
from scavenger.core.paths import KeySpace
from scavenger.core.repository_protocols import KeyValueStore

logger = logging.getLogger(__name__)


class IntegrityAuditor:
    def __init__(self, store: KeyValueStore, keys: KeySpace | None = None):
        self.store = store
        self.keys = keys or KeySpace()

    async def snapshot(self) -> StoreSnapshot:
        raw = {}
        for kind in EntityKind:
            raw[kind.value] = await self.store.read(str(self.keys.collection(kind)))
        return StoreSnapshot.from_raw(**raw)

    async def audit(self) -> list[IntegrityViolation]:
        violations = check_integrity(await self.snapshot())
        if violations:
            logger.warning(
                f"Integrity audit found {len(violations)} violation(s)",
                extra={"operation": "audit", "steps": len(violations)},
            )
        else:
            logger.info("Integrity audit clean", extra={"operation": "audit"})
        return violations
