"""
One-way password hashing.

Thin wrapper over Werkzeug's ``generate_password_hash`` /
``check_password_hash``.  Every call to :func:`hash_password` draws a fresh
random salt, so hashing the same plaintext twice yields two different
digests.  The method string carries the work factor, e.g.
``"pbkdf2:sha256:600000"`` runs 600k PBKDF2 iterations.
"""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

DEFAULT_METHOD = "pbkdf2:sha256:600000"
SALT_LENGTH = 16


def hash_password(plaintext: str, method: str | None = None) -> str:
    """Return a salted digest of *plaintext* in Werkzeug's ``method$salt$hash`` format."""
    return generate_password_hash(
        plaintext, method=method or DEFAULT_METHOD, salt_length=SALT_LENGTH
    )


def verify_password(plaintext: str, digest: str) -> bool:
    """
    Check *plaintext* against a digest produced by :func:`hash_password`.

    Never raises: a mismatch, a malformed digest or a non-string argument
    all simply return ``False``.
    """
    if not isinstance(plaintext, str) or not isinstance(digest, str):
        return False
    try:
        return check_password_hash(digest, plaintext)
    except (ValueError, TypeError):
        return False
