"""Tree Operations — verifies null pruning, nested set/delete, and overlap checks.

Tests:
    - prune drops None and empty containers recursively
    - set_in creates parents; deleting the last child removes empty parents
    - get_in returns copies and None for missing segments
    - check_disjoint rejects ancestor/equal paths and the root
"""

import pytest

from syncnote.core.tree_ops import check_disjoint, get_in, prune, set_in


def test_prune_removes_nulls_and_empty_containers():
    assert prune({"a": None, "b": {}, "c": {"d": None}, "e": 1}) == {"e": 1}
    assert prune({"a": None}) is None
    assert prune([None, 1, {}]) == [1]
    assert prune("") == ""


def test_set_in_creates_parents():
    root = {}
    set_in(root, ["notes", "n1", "title"], "Hello")
    assert root == {"notes": {"n1": {"title": "Hello"}}}


def test_set_in_none_deletes_and_prunes_empty_parents():
    root = {"notes": {"n1": {"title": "Hello"}}, "users": {"u1": {"x": 1}}}
    set_in(root, ["notes", "n1", "title"], None)
    assert root == {"users": {"u1": {"x": 1}}}


def test_set_in_delete_of_missing_path_is_noop():
    root = {"users": {"u1": {"x": 1}}}
    set_in(root, ["notes", "n1"], None)
    assert root == {"users": {"u1": {"x": 1}}}


def test_set_in_rejects_root():
    with pytest.raises(ValueError):
        set_in({}, [], {"a": 1})


def test_get_in_returns_copy():
    root = {"a": {"b": [1, 2]}}
    value = get_in(root, ["a"])
    value["b"].append(3)
    assert root == {"a": {"b": [1, 2]}}
    assert get_in(root, ["a", "missing"]) is None
    assert get_in(root, ["a", "b", "1"]) == 2


def test_check_disjoint():
    check_disjoint(["notes/n1", "shared_notes/s1", "notes/n2"])
    with pytest.raises(ValueError):
        check_disjoint(["notes/n1", "notes/n1/title"])
    with pytest.raises(ValueError):
        check_disjoint(["notes/n1", "notes/n1"])
    with pytest.raises(ValueError):
        check_disjoint([""])
