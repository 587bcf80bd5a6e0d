"""Activity Text — pure mapping from an audit action to its display sentence.

Invariants:
    - Fixed-text actions ignore detail
    - shared / unshared / permission_changed / category_changed prefer detail when present
    - Unknown actions render as their raw code
"""

from syncnote.core.domain_types import ActivityAction

_FIXED = {
    ActivityAction.CREATED.value: "created this note",
    ActivityAction.EDITED.value: "edited this note",
    ActivityAction.PINNED.value: "pinned this note",
    ActivityAction.UNPINNED.value: "unpinned this note",
    ActivityAction.COLOR_CHANGED.value: "changed note color",
}

_DETAIL_OVERRIDABLE = {
    ActivityAction.SHARED.value: "shared this note",
    ActivityAction.UNSHARED.value: "removed access",
    ActivityAction.PERMISSION_CHANGED.value: "changed permissions",
    ActivityAction.CATEGORY_CHANGED.value: "changed category",
}


def describe(action: "str | ActivityAction", detail: str | None = None) -> str:
    """Display text for one activity record. Pure, no IO."""
    code = action.value if isinstance(action, ActivityAction) else action
    if code in _FIXED:
        return _FIXED[code]
    if code in _DETAIL_OVERRIDABLE:
        return detail if detail is not None else _DETAIL_OVERRIDABLE[code]
    return code
