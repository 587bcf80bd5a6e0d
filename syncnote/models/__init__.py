"""ORM Models — SQLAlchemy declarative models for the SQL tree-store backend.

Design Decisions:
    - Imported here so Base.metadata knows every table before create_all runs
"""

from syncnote.models.tree_node import TreeNode  # noqa: F401
