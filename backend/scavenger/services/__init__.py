"""Services Layer: the four entity directories and the write machinery they share.

Invariants:
    - Directories validate preconditions, AssociationWriter plans cross-entity writes
    - Every multi-write operation is committed through a WritePlan
"""
