"""ORM Models: SQLAlchemy declarative models backing the SQL key-value store.

Invariants:
    - All models inherit from Base (db/base.py)
    - All models imported here so Base.metadata is complete before create_all
"""

from scavenger.models.kv_node import KvNode  # noqa: F401
