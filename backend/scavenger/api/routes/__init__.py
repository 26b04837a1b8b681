"""Route Modules: one file per entity.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
"""
