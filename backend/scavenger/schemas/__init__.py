"""Pydantic Schemas: request bodies for the HTTP surface.

Invariants:
    - Schemas validate at the system boundary only; records live in core/records.py
"""
