"""Infrastructure Layer: key-value store adapters and cross-cutting concerns.

Invariants:
    - Infrastructure never imports domain rules from core/ (errors, paths and protocols only)
    - Store failures surface as StoreError, never as driver exceptions
"""
