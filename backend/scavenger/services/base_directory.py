"""Base Directory: store access, record loading and operation guarding shared by all directories.

Invariants:
    - The store handle, key space and guard are injected; directories hold no globals
    - Every read is parsed into a record through Record.from_store()
    - Mutating operations are wrapped by @mutation: when a guard lock is shared,
      at most one mutation runs at a time across every directory holding it
    - A mutation never calls another @mutation (the guard is not reentrant)

Design Decisions:
    - Without a guard, operations interleave at every store call (read-check-then-write
      race); the Directories facade supplies a shared lock by default
"""

import asyncio
import functools
import logging
import time
from contextlib import nullcontext
from enum import Enum
from typing import Any, Callable

from scavenger.core.domain_types import (
    EntityKind, FIELD_TYPES, OPTIONAL_FIELDS, Millis,
)
from scavenger.core.errors import (
    AlreadyExistsError, ErrorContext, InvalidStateError, NotFoundError, ValidationError,
)
from scavenger.core.paths import KeySpace, StorePath, validate_key
from scavenger.core.records import Artifact, Session, Team, User
from scavenger.core.repository_protocols import KeyValueStore
from scavenger.services.associations import AssociationWriter
from scavenger.services.unit_of_work import WritePlan

logger = logging.getLogger(__name__)

RECORD_TYPES = {
    EntityKind.USER: User,
    EntityKind.SESSION: Session,
    EntityKind.TEAM: Team,
    EntityKind.ARTIFACT: Artifact,
}


def now_millis() -> Millis:
    return Millis(int(time.time() * 1000))


def mutation(func):
    """Run a directory coroutine under the directory's guard (if any)."""
    @functools.wraps(func)
    async def wrapper(self, *args, **kwargs):
        async with self._guarded():
            return await func(self, *args, **kwargs)
    return wrapper


class BaseDirectory:
    """Common plumbing; subclasses set `kind`."""

    kind: EntityKind

    def __init__(
        self,
        store: KeyValueStore,
        keys: KeySpace | None = None,
        guard: asyncio.Lock | None = None,
        clock: Callable[[], Millis] = now_millis,
    ):
        self.store = store
        self.keys = keys or KeySpace()
        self.links = AssociationWriter(self.keys)
        self._guard = guard
        self._clock = clock

    def _guarded(self):
        return self._guard if self._guard is not None else nullcontext()

    def plan(self, operation: str) -> WritePlan:
        return WritePlan(self.store, f"{self.kind.value}.{operation}")

    # ─── Reads ───────────────────────────────────────────────────

    async def _exists(self, path: StorePath) -> bool:
        return await self.store.exists(str(path))

    async def _read(self, path: StorePath) -> Any:
        return await self.store.read(str(path))

    async def _load(self, kind: EntityKind, entity_id: str):
        validate_key(entity_id, f"{kind.label.lower()}_id")
        raw = await self._read(self.keys.entity(kind, entity_id))
        return RECORD_TYPES[kind].from_store(raw, entity_id)

    async def _require(self, kind: EntityKind, entity_id: str):
        record = await self._load(kind, entity_id)
        if record is None:
            raise NotFoundError(kind.label, entity_id)
        return record

    async def get(self, entity_id: str):
        """Return the record, or None if absent."""
        return await self._load(self.kind, entity_id)

    # ─── Writes ──────────────────────────────────────────────────

    async def _create(self, entity_id: str, record) -> None:
        validate_key(entity_id, f"{self.kind.label.lower()}_id")
        path = self.keys.entity(self.kind, entity_id)
        if await self._exists(path):
            raise AlreadyExistsError(self.kind.label, entity_id)
        await self.plan("create").write(path, record.to_store()).commit()
        self._completed("create", entity_id)

    async def _delete(self, entity_id: str) -> None:
        await self.plan("delete").delete(self.keys.entity(self.kind, entity_id)).commit()
        self._completed("delete", entity_id)

    def _field_plan(self, entity_id: str, field: Enum, value: Any, operation: str) -> WritePlan:
        check_field_value(field, value)
        return self.plan(operation).write(
            self.keys.entity(self.kind, entity_id).child(field), value,
        )

    # ─── Logging helpers ─────────────────────────────────────────

    def _completed(self, operation: str, entity_id: str, **extra: Any) -> None:
        logger.info(
            f"{self.kind.label} {entity_id}: {operation}",
            extra={
                "operation": operation, "entity": self.kind.value,
                "entity_id": entity_id, **extra,
            },
        )

    def _reject(self, operation: str, entity_id: str, message: str) -> InvalidStateError:
        """Build (and log) the error for a failed precondition; caller raises it."""
        logger.debug(
            f"{self.kind.label} {entity_id}: {operation} rejected: {message}",
            extra={
                "operation": operation, "entity": self.kind.value,
                "entity_id": entity_id, "error_code": "INVALID_STATE",
            },
        )
        return InvalidStateError(
            message,
            ErrorContext(
                operation=operation, entity=self.kind.label, entity_id=entity_id,
            ),
        )


def check_field_value(field: Enum, value: Any) -> None:
    """Reject values of the wrong primitive type for a settable field."""
    if value is None and field in OPTIONAL_FIELDS:
        return
    expected = FIELD_TYPES.get(field)
    if expected is None:
        raise ValidationError(f"'{field.value}' is not a settable field", "field")
    if expected is bool:
        ok = isinstance(value, bool)
    else:
        ok = isinstance(value, expected) and not isinstance(value, bool)
    if not ok:
        raise ValidationError(
            f"'{field.value}' expects {expected.__name__}, got {type(value).__name__}",
            field.value,
        )


def coerce_field(field_type: type[Enum], field: Any) -> Enum:
    """Accept an enum member or its stored name; anything else is a ValidationError."""
    try:
        return field_type(field)
    except ValueError:
        allowed = ", ".join(f.value for f in field_type)
        raise ValidationError(
            f"'{field}' is not a settable field (expected one of: {allowed})", "field",
        ) from None
