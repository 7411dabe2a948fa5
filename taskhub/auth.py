"""
Request authorization gate.

Every protected endpoint goes through :func:`require_auth`, which pulls the
Bearer token out of the ``Authorization`` header, verifies it with the
application's :class:`~taskhub.tokens.TokenService`, and hands the decoded
:class:`~taskhub.tokens.Claims` to the view as an explicit ``identity``
keyword argument.  Holding a valid token is the only proof of identity;
there is no session store behind it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import wraps

from flask import current_app, request

from .errors import InvalidToken, TokenExpired, Unauthorized
from .tokens import Claims, TokenService, extract_bearer_token

logger = logging.getLogger(__name__)

TOKEN_SERVICE_EXTENSION = "taskhub.token_service"


def get_token_service() -> TokenService:
    """Return the token service bound to the current application."""
    return current_app.extensions[TOKEN_SERVICE_EXTENSION]


def authenticate(header_value: str | None, token_service: TokenService) -> Claims:
    """
    Resolve an ``Authorization`` header value into verified claims.

    Raises:
        Unauthorized: The header is absent or not of the form ``Bearer <token>``.
        TokenExpired: The token verified but its expiry has passed.
        InvalidToken: The signature does not match or the token is malformed.
    """
    token = extract_bearer_token(header_value)
    if token is None:
        raise Unauthorized("Missing authorization token")

    try:
        return token_service.verify(token)
    except TokenExpired:
        logger.info("Rejected expired token")
        raise
    except InvalidToken as exc:
        logger.warning("Rejected invalid token: %s", exc.message)
        raise InvalidToken("Invalid or malformed token") from exc


def require_auth(view_func: Callable):
    """
    Decorator that enforces Bearer-token authentication on API endpoints.

    On failure the raised :class:`Unauthorized` subclass is turned into a
    ``401`` envelope by the application's error handlers before the wrapped
    view runs.
    """

    @wraps(view_func)
    def wrapper(*args, **kwargs):
        identity = authenticate(request.headers.get("Authorization"), get_token_service())
        return view_func(*args, identity=identity, **kwargs)

    return wrapper
