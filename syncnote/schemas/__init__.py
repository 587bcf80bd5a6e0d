"""Pydantic Schemas — entities as they are stored in the tree.

Invariants:
    - Field aliases are the camelCase wire keys of stored documents
    - Domain types from core/ used for enum fields
"""
