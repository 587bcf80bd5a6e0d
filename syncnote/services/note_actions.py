"""Note Actions — one user action = one primitive operation plus its audit record.

Invariants:
    - The activity record is appended only after the primitive succeeded
    - Activity appends are fire-and-forget; they never change the action's outcome
    - share_with_username refuses the actor's own username (case-insensitive)
      before any store access
"""

from syncnote.core.domain_types import ActivityAction, NoteId, Permission
from syncnote.core.errors import StoreFailureError, ValidationError
from syncnote.core.paths import normalize_username
from syncnote.schemas.note import Note
from syncnote.services.activity_log import ActivityLog
from syncnote.services.boundary import returns_result
from syncnote.services.credential_store import CredentialStore
from syncnote.services.note_repository import NoteRepository
from syncnote.services.sharing import SharingGraph, parse_permission


class NoteActions:
    """Note operations as the editor and list screens issue them."""

    def __init__(
        self,
        notes: NoteRepository,
        sharing: SharingGraph,
        credentials: CredentialStore,
        activity: ActivityLog,
    ):
        self.notes = notes
        self.sharing = sharing
        self.credentials = credentials
        self.activity = activity

    @returns_result("save_note")
    async def save_note(self, note: Note, actor_id: str, actor_name: str) -> NoteId:
        """Create when the note has no id yet, otherwise overwrite it."""
        if not note.id:
            if not note.owner_id:
                note.owner_id = actor_id
            note_id = (await self.notes.create(note)).unwrap()
            self.activity.append(note_id, actor_id, actor_name, ActivityAction.CREATED)
            return note_id

        if not await self.notes.update(note, actor_id, actor_name):
            raise StoreFailureError("note update was not applied", "save_note")
        self.activity.append(note.id, actor_id, actor_name, ActivityAction.EDITED)
        return NoteId(note.id)

    async def toggle_pin(
        self, note_id: str, pinned: bool, actor_id: str, actor_name: str,
    ) -> bool:
        if not await self.notes.set_pinned(note_id, pinned):
            return False
        action = ActivityAction.PINNED if pinned else ActivityAction.UNPINNED
        self.activity.append(note_id, actor_id, actor_name, action)
        return True

    async def change_color(
        self, note_id: str, color: str, actor_id: str, actor_name: str,
    ) -> bool:
        if not await self.notes.set_color(note_id, color):
            return False
        self.activity.append(
            note_id, actor_id, actor_name, ActivityAction.COLOR_CHANGED,
            f"Changed color to {color}",
        )
        return True

    async def change_category(
        self, note_id: str, category: str, actor_id: str, actor_name: str,
    ) -> bool:
        if not await self.notes.set_category(note_id, category):
            return False
        self.activity.append(
            note_id, actor_id, actor_name, ActivityAction.CATEGORY_CHANGED,
            f"Moved to {category}",
        )
        return True

    # ─── Sharing ────────────────────────────────────────────────

    @returns_result("share_with_username")
    async def share_with_username(
        self,
        note_id: str,
        username: str,
        permission: "str | Permission",
        actor_id: str,
        actor_name: str,
    ) -> dict:
        """Resolve `username` and share the note with that account.

        Returns the recipient's public view so callers can show who got access.
        """
        perm = parse_permission(permission)
        target = normalize_username(username or "")
        if target and target == normalize_username(actor_name or ""):
            raise ValidationError("You cannot share a note with yourself", "username")

        recipient = (await self.credentials.get_account_by_username(target)).unwrap()
        if not await self.sharing.share(note_id, actor_id, recipient.id, perm):
            raise StoreFailureError("Failed to share note", "share_with_username")
        self.activity.append(
            note_id, actor_id, actor_name, ActivityAction.SHARED,
            f"Shared with @{recipient.username} ({perm.value} permission)",
        )
        return recipient.public_view()

    async def revoke_access(
        self,
        note_id: str,
        recipient_id: str,
        recipient_name: str,
        actor_id: str,
        actor_name: str,
    ) -> bool:
        if not await self.sharing.unshare(note_id, recipient_id):
            return False
        self.activity.append(
            note_id, actor_id, actor_name, ActivityAction.UNSHARED,
            f"Removed access for {recipient_name}",
        )
        return True

    async def change_permission(
        self,
        note_id: str,
        recipient_id: str,
        recipient_name: str,
        new_permission: "str | Permission",
        actor_id: str,
        actor_name: str,
    ) -> bool:
        if not await self.sharing.update_permission(note_id, recipient_id, new_permission):
            return False
        level = Permission.parse(new_permission).value.upper()
        self.activity.append(
            note_id, actor_id, actor_name, ActivityAction.PERMISSION_CHANGED,
            f"Changed {recipient_name}'s permission to {level}",
        )
        return True
