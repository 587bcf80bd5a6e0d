"""Tree Paths — collection names, path joining, and key normalization.

Invariants:
    - Paths are slash-separated, no leading/trailing slash, no empty segments
    - Segments never contain . # $ [ ] or / (Firebase key rules)
    - Usernames and emails are trimmed + lower-cased before they become keys
    - Email index keys replace "." with "," so the address is a legal key

Design Decisions:
    - One module owns every collection name: services never spell paths inline
"""

USERS = "users"
USERNAMES = "usernames"
EMAILS = "emails"
NOTES = "notes"
SHARED_NOTES = "shared_notes"
CATEGORIES = "categories"
ACTIVITY_LOGS = "activity_logs"
SHARE_LINKS = "share_links"

_FORBIDDEN = frozenset(".#$[]/")


def split_path(path: str) -> list[str]:
    """Split into segments, ignoring leading/trailing/duplicate slashes."""
    return [s for s in path.split("/") if s]


def validate_segment(segment: str) -> str:
    if not segment:
        raise ValueError("Path segment cannot be empty")
    bad = _FORBIDDEN.intersection(segment)
    if bad:
        raise ValueError(
            f"Path segment {segment!r} contains forbidden characters: {''.join(sorted(bad))}",
        )
    return segment


def join_path(*segments: str) -> str:
    """Join already-normalized segments into a store path."""
    return "/".join(validate_segment(str(s)) for s in segments)


def normalize_path(path: str) -> str:
    return join_path(*split_path(path))


def is_ancestor(parent: str, child: str) -> bool:
    """True when `parent` is `child` or one of its ancestors."""
    p, c = split_path(parent), split_path(child)
    return len(p) <= len(c) and c[: len(p)] == p


def normalize_username(username: str) -> str:
    return username.strip().lower()


def normalize_email(email: str) -> str:
    return email.strip().lower()


def email_key(email: str) -> str:
    return normalize_email(email).replace(".", ",")
