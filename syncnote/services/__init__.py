"""Services Layer — credential store, notes, sharing, aggregation, activity, categories.

Invariants:
    - Services see only the TreeStore protocol, never a concrete backend
    - Public operations resolve to Result or bool; nothing raises past the boundary
"""
