"""Core Layer — pure domain logic: types, hashing, paths, ids, ordering, texts.

Invariants:
    - No module in core/ imports from services/ or infrastructure/
    - Everything here is deterministic given its inputs (clocks are injected)
"""
