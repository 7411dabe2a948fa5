"""
Account registration, login and profile management.

Login failures are intentionally uniform: an unknown email and a wrong
password both raise :class:`InvalidCredentials` with the same message, so
the response never reveals which of the two was wrong.
"""

from __future__ import annotations

import logging
from typing import Any

from flask import current_app
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError

from .. import db
from ..errors import (
    EMAIL_EXISTS,
    USER_NOT_FOUND,
    USERNAME_EXISTS,
    Conflict,
    InvalidCredentials,
    NotFound,
    ValidationError,
)
from ..models import Account
from ..passwords import hash_password, verify_password
from ..sanitization import normalize_email
from ..tokens import Claims, TokenService
from ..validators import (
    FieldError,
    validate_login,
    validate_profile_update,
    validate_registration,
)

logger = logging.getLogger(__name__)

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
NAME_MAX_LENGTH = 100

NAME_FIELDS = {"firstName": "First name", "lastName": "Last name"}


def _name_length_errors(names: dict[str, str]) -> list[FieldError]:
    """Report names longer than the account columns can hold."""
    return [
        FieldError(
            field, f"{NAME_FIELDS[field]} must be {NAME_MAX_LENGTH} characters or less"
        )
        for field, value in names.items()
        if len(value) > NAME_MAX_LENGTH
    ]


def _find_conflict(email: str, username: str) -> Conflict | None:
    """Return a Conflict naming the colliding field, email taking precedence."""
    existing = db.session.scalars(
        select(Account).where(or_(Account.email == email, Account.username == username))
    ).all()
    if any(account.email == email for account in existing):
        return Conflict("email", code=EMAIL_EXISTS)
    if existing:
        return Conflict("username", code=USERNAME_EXISTS)
    return None


def register(payload: Any) -> dict[str, Any]:
    """
    Create a new account.

    Raises:
        ValidationError: The payload fails validation, or the username is
            outside the 3-30 character range the store enforces.
        Conflict: The email or username is already taken.
    """
    errors = validate_registration(payload)
    if errors:
        raise ValidationError(errors=errors)

    email = normalize_email(payload["email"])
    username = payload["username"].strip()
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        raise ValidationError(
            errors=[
                FieldError(
                    "username",
                    f"Username must be {USERNAME_MIN_LENGTH}-{USERNAME_MAX_LENGTH} characters",
                )
            ]
        )

    names = {field: payload[field].strip() for field in NAME_FIELDS}
    name_errors = _name_length_errors(names)
    if name_errors:
        raise ValidationError(errors=name_errors)

    conflict = _find_conflict(email, username)
    if conflict is not None:
        raise conflict

    account = Account(
        email=email,
        username=username,
        password_hash=hash_password(
            payload["password"], current_app.config.get("PASSWORD_HASH_METHOD")
        ),
        first_name=names["firstName"],
        last_name=names["lastName"],
    )
    db.session.add(account)
    try:
        db.session.commit()
    except IntegrityError:
        # A concurrent registration won the race between the check and the insert
        db.session.rollback()
        conflict = _find_conflict(email, username)
        if conflict is None:
            raise
        raise conflict

    logger.info("Registered account id=%s", account.id)
    return account.to_public_dict()


def login(payload: Any, token_service: TokenService) -> dict[str, Any]:
    """
    Verify credentials and issue an identity token.

    Returns:
        ``{"accessToken": <jwt>, "user": {id, email, username}}``.

    Raises:
        ValidationError: The payload fails validation.
        InvalidCredentials: Unknown email or wrong password.
    """
    errors = validate_login(payload)
    if errors:
        raise ValidationError(errors=errors)

    email = normalize_email(payload["email"])
    account = db.session.scalar(select(Account).where(Account.email == email))
    if account is None or not verify_password(payload["password"], account.password_hash):
        logger.warning("Failed login attempt")
        raise InvalidCredentials()

    token = token_service.issue(account.id, account.email)
    return {"accessToken": token, "user": account.to_public_dict()}


def logout() -> str:
    """
    Acknowledge a logout.

    Tokens are stateless, so there is nothing to invalidate server-side;
    the client is expected to discard its token.
    """
    return "Logged out successfully"


def _get_account(account_id: int) -> Account:
    account = db.session.get(Account, account_id)
    if account is None:
        raise NotFound("User not found", code=USER_NOT_FOUND)
    return account


def get_profile(identity: Claims) -> dict[str, Any]:
    return _get_account(identity.account_id).to_dict()


def update_profile(identity: Claims, payload: Any) -> dict[str, Any]:
    """
    Apply the profile fields present in *payload*.

    Blank names are ignored rather than stored.  A payload with nothing
    applicable raises ``ValidationError("No valid fields to update")``.
    """
    errors = validate_profile_update(payload)
    if errors:
        raise ValidationError(errors=errors)

    data = payload if isinstance(payload, dict) else {}
    names = {
        field: data[field].strip()
        for field in NAME_FIELDS
        if isinstance(data.get(field), str) and data[field].strip()
    }
    name_errors = _name_length_errors(names)
    if name_errors:
        raise ValidationError(errors=name_errors)

    updates: dict[str, str] = {}
    if "firstName" in names:
        updates["first_name"] = names["firstName"]
    if "lastName" in names:
        updates["last_name"] = names["lastName"]
    if isinstance(data.get("profileImage"), str):
        updates["profile_image"] = data["profileImage"]

    if not updates:
        raise ValidationError("No valid fields to update")

    account = _get_account(identity.account_id)
    for attribute, value in updates.items():
        setattr(account, attribute, value)
    db.session.commit()
    return account.to_dict()
