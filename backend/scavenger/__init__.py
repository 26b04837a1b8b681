"""Scavenger hunt integrity store.

Invariants:
    - Package root contains no executable code (no import side effects)
"""
