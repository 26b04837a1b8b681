"""KvNode ORM: one row per leaf of the key-value tree.

Invariants:
    - path is the full slash-joined address of a leaf (primary key)
    - value holds a JSON scalar or list, never a map (maps are implied by paths)
    - No row's path is a strict prefix (plus "/") of another row's path

Design Decisions:
    - Leaf rows instead of one JSON blob per entity: every field is individually
      writable with one statement, matching the store contract
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from scavenger.db.base import Base


class KvNode(Base):
    """A single leaf value in the key-value tree."""
    __tablename__ = "kv_nodes"

    path: Mapped[str] = mapped_column(String(1024), primary_key=True)
    value: Mapped[Any] = mapped_column(JSON, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
