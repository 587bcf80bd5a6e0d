"""Database Infrastructure — SQLAlchemy Base for the SQL tree-store backend.

Invariants:
    - All sessions are async (AsyncSession)
"""
