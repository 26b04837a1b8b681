"""Write Plan: ordered store writes committed as one unit, compensated on failure.

Invariants:
    - Steps are applied strictly in the order they were planned
    - The prior value at each path is read immediately before that step is applied
    - On the first failing step, every applied step is restored in reverse order
      (prior None means delete); the caller then receives PartialCommitError
    - A failed compensation is logged at ERROR and reported via
      PartialCommitError.compensated=False, never swallowed

Design Decisions:
    - The store offers no compare-and-swap, so a failed plan is undone with
      compensating writes instead of a single atomic commit (saga)
    - Planning is pure; only commit() touches the store
"""

import logging
from dataclasses import dataclass
from typing import Any

from scavenger.core.errors import ErrorContext, PartialCommitError
from scavenger.core.paths import StorePath
from scavenger.core.repository_protocols import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WriteStep:
    path: StorePath
    value: Any  # None deletes the path

    @property
    def is_delete(self) -> bool:
        return self.value is None


class WritePlan:
    """Collects the writes of one directory operation, then commits them."""

    def __init__(self, store: KeyValueStore, operation: str):
        self._store = store
        self.operation = operation
        self._steps: list[WriteStep] = []

    def write(self, path: StorePath, value: Any) -> "WritePlan":
        self._steps.append(WriteStep(path, value))
        return self

    def delete(self, path: StorePath) -> "WritePlan":
        self._steps.append(WriteStep(path, None))
        return self

    @property
    def steps(self) -> tuple[WriteStep, ...]:
        return tuple(self._steps)

    def __len__(self) -> int:
        return len(self._steps)

    async def commit(self) -> None:
        applied: list[tuple[str, Any]] = []
        for step in self._steps:
            path = str(step.path)
            try:
                prior = await self._store.read(path)
                if step.is_delete:
                    await self._store.delete(path)
                else:
                    await self._store.write(path, step.value)
            except Exception as e:
                compensated = await self._compensate(applied)
                logger.error(
                    f"{self.operation}: write to {path} failed, "
                    f"{len(applied)} step(s) {'rolled back' if compensated else 'stranded'}",
                    extra={
                        "operation": self.operation, "path": path,
                        "steps": len(applied), "compensated": compensated,
                    },
                )
                raise PartialCommitError(
                    path, len(applied), compensated,
                    ErrorContext(operation=self.operation, path=path),
                ) from e
            applied.append((path, prior))

    async def _compensate(self, applied: list[tuple[str, Any]]) -> bool:
        restored = True
        for path, prior in reversed(applied):
            try:
                if prior is None:
                    await self._store.delete(path)
                else:
                    await self._store.write(path, prior)
            except Exception:
                restored = False
                logger.error(
                    f"{self.operation}: compensation of {path} failed",
                    extra={"operation": self.operation, "path": path},
                    exc_info=True,
                )
        return restored
