"""
Identity token issuing and verification.

Tokens are HS256-signed JSON Web Tokens carrying the account identity.
They are stateless: nothing is persisted, and a token stays valid for its
whole lifetime once issued (there is no revocation list).

Token structure (claims):
    - ``account_id`` -- integer primary key of the authenticated account.
    - ``email``      -- the account's (lower-cased) email address.
    - ``iat``        -- *issued-at* timestamp (UTC epoch seconds).
    - ``exp``        -- *expiration* timestamp (UTC epoch seconds).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping

import jwt

from .errors import InvalidToken, TokenExpired

REQUIRED_TOKEN_CLAIMS = ["account_id", "email", "iat", "exp"]

# "Bearer" followed by exactly one space and a token containing no whitespace
_BEARER_PATTERN = re.compile(r"Bearer (\S+)")


@dataclass(frozen=True)
class TokenSettings:
    """Immutable signing configuration injected into :class:`TokenService`."""

    secret: str
    expiry_hours: int = 24
    algorithm: str = "HS256"
    leeway_seconds: int = 0

    def __post_init__(self) -> None:
        if not self.secret:
            raise RuntimeError("A non-empty JWT secret is required")

    @classmethod
    def from_config(cls, secret: str, config: Mapping[str, Any]) -> "TokenSettings":
        return cls(
            secret=secret,
            expiry_hours=int(config.get("JWT_EXPIRY_HOURS", 24)),
            algorithm=config.get("JWT_ALGORITHM", "HS256"),
            leeway_seconds=int(config.get("JWT_CLOCK_SKEW_SECONDS", 0)),
        )


@dataclass(frozen=True)
class Claims:
    """Decoded, validated token payload: the authenticated identity of a request."""

    account_id: int
    email: str
    issued_at: datetime
    expires_at: datetime


class TokenService:
    def __init__(self, settings: TokenSettings) -> None:
        self.settings = settings

    def issue(self, account_id: int, email: str) -> str:
        """
        Sign a token for *account_id* / *email* that expires after the
        configured TTL.

        Raises:
            ValueError: If *account_id* is not positive or *email* is blank.
        """
        if int(account_id) <= 0:
            raise ValueError("account_id must be a positive integer")
        if not isinstance(email, str) or not email.strip():
            raise ValueError("email must be a non-empty string")

        now = datetime.now(timezone.utc)
        expires_at = now + timedelta(hours=self.settings.expiry_hours)
        payload: dict[str, Any] = {
            "account_id": int(account_id),
            "email": email,
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        return jwt.encode(payload, self.settings.secret, algorithm=self.settings.algorithm)

    def verify(self, token: str) -> Claims:
        """
        Check the signature and expiry of *token* and return its claims.

        Raises:
            TokenExpired: If the current time is at or past ``exp``.
            InvalidToken: If the signature does not match, the token cannot
                be decoded, or a required claim is missing or ill-typed.
        """
        try:
            payload = jwt.decode(
                token,
                self.settings.secret,
                algorithms=[self.settings.algorithm],
                options={"require": REQUIRED_TOKEN_CLAIMS},
                leeway=self.settings.leeway_seconds,
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpired() from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidToken() from exc

        account_id = payload.get("account_id")
        email = payload.get("email")
        if isinstance(account_id, bool) or not isinstance(account_id, int) or account_id <= 0:
            raise InvalidToken("Invalid account_id claim")
        if not isinstance(email, str) or not email.strip():
            raise InvalidToken("Invalid email claim")

        return Claims(
            account_id=account_id,
            email=email,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )


def extract_bearer_token(header_value: str | None) -> str | None:
    """
    Return the token from an ``Authorization: Bearer <token>`` header value.

    The scheme must be exactly ``Bearer`` (case-sensitive), separated from
    the token by a single space, with nothing else in the header.  Any other
    shape yields ``None``.
    """
    if not header_value:
        return None
    match = _BEARER_PATTERN.fullmatch(header_value)
    if match is None:
        return None
    return match.group(1)
