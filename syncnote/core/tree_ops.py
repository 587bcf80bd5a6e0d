"""Tree Operations — pure nested-dict helpers implementing store write semantics.

Invariants:
    - prune() drops None values and empty containers recursively; a fully
      empty value becomes None (absent)
    - set_in() with value None deletes and then removes parents left empty
    - get_in() never mutates; returns None for any missing segment
    - check_disjoint() rejects an update map where one path contains another

Design Decisions:
    - Shared by the in-memory and SQL backends so both follow the same
      null-dropping, empty-parent-vanishing rules as the remote store
"""

import copy
from typing import Any

from syncnote.core.paths import is_ancestor, split_path


def prune(value: Any) -> Any:
    """Remove nulls and empty containers. Returns None when nothing remains."""
    if isinstance(value, dict):
        cleaned = {}
        for k, v in value.items():
            v = prune(v)
            if v is not None:
                cleaned[str(k)] = v
        return cleaned or None
    if isinstance(value, list):
        cleaned_list = [v for v in (prune(x) for x in value) if v is not None]
        return cleaned_list or None
    return value


def get_in(root: Any, segments: list[str]) -> Any:
    node = root
    for seg in segments:
        if isinstance(node, dict) and seg in node:
            node = node[seg]
        elif isinstance(node, list) and seg.isdigit() and int(seg) < len(node):
            node = node[int(seg)]
        else:
            return None
    return copy.deepcopy(node)


def set_in(root: dict, segments: list[str], value: Any) -> dict:
    """Set (or delete, when value prunes to None) at segments. Mutates root."""
    if not segments:
        raise ValueError("Cannot write to the store root")
    value = prune(copy.deepcopy(value))
    node = root
    trail = []
    for seg in segments[:-1]:
        child = node.get(seg)
        if not isinstance(child, dict):
            if value is None:
                return root
            child = {}
            node[seg] = child
        trail.append((node, seg))
        node = child
    if value is None:
        node.pop(segments[-1], None)
        for parent, seg in reversed(trail):
            if parent[seg]:
                break
            del parent[seg]
    else:
        node[segments[-1]] = value
    return root


def check_disjoint(paths: list[str]) -> None:
    """Raise ValueError when any path is an ancestor of (or equal to) another."""
    for i, a in enumerate(paths):
        if not split_path(a):
            raise ValueError("Cannot write to the store root")
        for b in paths[i + 1:]:
            if is_ancestor(a, b) or is_ancestor(b, a):
                raise ValueError(f"Path {a!r} overlaps path {b!r} in the same update")
