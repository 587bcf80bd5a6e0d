"""Activity Text — verifies fixed texts, detail overrides, and unknown codes."""

import pytest

from syncnote.core.activity_text import describe
from syncnote.core.domain_types import ActivityAction


@pytest.mark.parametrize("action,text", [
    (ActivityAction.CREATED, "created this note"),
    (ActivityAction.EDITED, "edited this note"),
    (ActivityAction.PINNED, "pinned this note"),
    (ActivityAction.UNPINNED, "unpinned this note"),
    (ActivityAction.COLOR_CHANGED, "changed note color"),
])
def test_fixed_texts_ignore_detail(action, text):
    assert describe(action) == text
    assert describe(action.value, "Changed color to #FF0000") == text


@pytest.mark.parametrize("action,fallback", [
    ("shared", "shared this note"),
    ("unshared", "removed access"),
    ("permission_changed", "changed permissions"),
    ("category_changed", "changed category"),
])
def test_detail_overrides_context_dependent_actions(action, fallback):
    assert describe(action) == fallback
    assert describe(action, "Shared with @bob (edit permission)") == (
        "Shared with @bob (edit permission)"
    )


def test_unknown_action_renders_raw_code():
    assert describe("archived") == "archived"
