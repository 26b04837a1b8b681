"""Core Layer: pure domain logic, no IO, no async, no store access.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic
"""
