"""
Free-text sanitisation applied before user input reaches the store.

Angle brackets are stripped outright rather than escaped, so
``"<script>hi</script>"`` is stored as ``"scripthi/script"``.
"""

from __future__ import annotations

from typing import Any

MAX_TEXT_LENGTH = 1000
MAX_EMAIL_LENGTH = 254


def sanitize_string(value: Any) -> str:
    """Strip ``<``/``>``, trim, and cap at 1000 characters; non-strings become ``""``."""
    if not isinstance(value, str):
        return ""
    cleaned = value.replace("<", "").replace(">", "").strip()
    return cleaned[:MAX_TEXT_LENGTH]


def sanitize_tags(value: Any) -> list[str]:
    """Keep string entries only, sanitise each, and drop the ones left empty."""
    if not isinstance(value, list):
        return []
    tags = (sanitize_string(item) for item in value if isinstance(item, str))
    return [tag for tag in tags if tag]


def normalize_email(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip().lower()[:MAX_EMAIL_LENGTH]
