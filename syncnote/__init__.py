"""SyncNote — data-access and consistency layer for a note-taking client.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Explicit imports only, no star exports; SyncNoteClient lives in syncnote.client
"""
