"""
Account endpoints.

Endpoints:
    POST /auth/register  -- Create a new account (public).
    POST /auth/login     -- Exchange email + password for a token (public).
    POST /auth/logout    -- Acknowledge logout; the client discards its token.
"""

from __future__ import annotations

from flask import Blueprint, Response

from ..auth import get_token_service, require_auth
from ..responses import success
from ..services import accounts
from ..tokens import Claims
from . import json_body

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/register", methods=["POST"])
def register() -> tuple[Response, int]:
    """
    Returns:
        201 with ``{id, email, username}`` on success.
        400 on validation errors, 409 if the email or username is taken.
    """
    user = accounts.register(json_body())
    return success(user, message="User registered successfully", status_code=201)


@auth_bp.route("/login", methods=["POST"])
def login() -> tuple[Response, int]:
    """
    Returns:
        200 with ``{accessToken, user}`` on success.
        400 on validation errors, 401 on bad credentials.
    """
    result = accounts.login(json_body(), get_token_service())
    return success(result, message="Login successful")


@auth_bp.route("/logout", methods=["POST"])
@require_auth
def logout(identity: Claims) -> tuple[Response, int]:
    return success(message=accounts.logout())
