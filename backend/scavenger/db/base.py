"""SQLAlchemy Declarative Base: shared base class for all ORM models.

Invariants:
    - Base is the single source of truth for table metadata
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all scavenger ORM models."""
    pass
