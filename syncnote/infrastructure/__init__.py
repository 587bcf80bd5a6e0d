"""Infrastructure Layer — tree-store backends, session cache, logging setup.

Invariants:
    - Infrastructure never imports from services/
    - Every backend failure is mapped to StoreFailureError

Design Decisions:
    - One backend per module; store_factory picks one from settings
"""
