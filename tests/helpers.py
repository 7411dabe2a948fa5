"""Test helper constants and functions used across the suites."""

from __future__ import annotations

API = "/api/v1"
DEFAULT_PASSWORD = "StrongPass123!"
TEST_HASH_METHOD = "pbkdf2:sha256:1000"


def auth_headers(token: str) -> dict[str, str]:
    """Build common JSON API headers with bearer token auth."""
    return {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
