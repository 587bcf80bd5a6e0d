"""Password Hashing — salted SHA-256 credentials in the `salt$digest` wire format.

Invariants:
    - Salt is 16 random bytes from `secrets`, stored hex-encoded
    - digest = SHA-256(hex_salt.encode() + password.encode("utf-8"))
    - Stored form is "{hex_salt}${hex_digest}" (never the plaintext)
    - verify_password never raises: malformed or missing hashes verify False
    - Security answers are trimmed + lower-cased before hashing AND verifying

Design Decisions:
    - The hex salt text (not the raw bytes) feeds the digest so hashes written
      by existing clients keep verifying
    - hmac.compare_digest for the final comparison
"""

import hashlib
import hmac
import secrets

SALT_BYTES = 16
_SEPARATOR = "$"


def _digest(password: str, hex_salt: str) -> str:
    h = hashlib.sha256()
    h.update(hex_salt.encode("ascii"))
    h.update(password.encode("utf-8"))
    return h.hexdigest()


def hash_password(password: str) -> str:
    """Hash with a fresh random salt. Two calls never return the same string."""
    hex_salt = secrets.token_bytes(SALT_BYTES).hex()
    return f"{hex_salt}{_SEPARATOR}{_digest(password, hex_salt)}"


def verify_password(password: str | None, stored_hash: str | None) -> bool:
    """Recompute the digest with the stored salt and compare."""
    if password is None or not stored_hash:
        return False
    parts = stored_hash.split(_SEPARATOR)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return False
    hex_salt, expected = parts
    try:
        computed = _digest(password, hex_salt)
    except UnicodeEncodeError:
        return False
    return hmac.compare_digest(computed, expected)


def normalize_answer(answer: str) -> str:
    return answer.strip().lower()


def hash_security_answer(answer: str) -> str:
    return hash_password(normalize_answer(answer))


def verify_security_answer(answer: str | None, stored_hash: str | None) -> bool:
    if answer is None:
        return False
    return verify_password(normalize_answer(answer), stored_hash)
