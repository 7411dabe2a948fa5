"""
Error taxonomy and the top-level JSON error handlers.

Services and validators signal failures by raising an :class:`ApiError`
subclass; a single set of handlers registered on the application converts
them (and any Werkzeug HTTP error or unexpected exception) into the uniform
response envelope::

    {"success": false, "error": {"code": ..., "message": ..., "statusCode": ...}}
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from flask import Flask, Response, jsonify
from werkzeug.exceptions import BadRequest, HTTPException

logger = logging.getLogger(__name__)

VALIDATION_ERROR = "VALIDATION_ERROR"
UNAUTHORIZED = "UNAUTHORIZED"
INVALID_TOKEN = "INVALID_TOKEN"
TOKEN_EXPIRED = "TOKEN_EXPIRED"
INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
EMAIL_EXISTS = "EMAIL_EXISTS"
USERNAME_EXISTS = "USERNAME_EXISTS"
USER_NOT_FOUND = "USER_NOT_FOUND"
TASK_NOT_FOUND = "TASK_NOT_FOUND"
NOT_FOUND = "NOT_FOUND"
INTERNAL_ERROR = "INTERNAL_ERROR"


class ApiError(Exception):
    """Base class for every failure that maps onto an HTTP error envelope."""

    status_code: int = 500
    code: str = INTERNAL_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, *, code: str | None = None) -> None:
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "statusCode": self.status_code,
        }


class ValidationError(ApiError):
    """Malformed or missing input; carries the per-field messages."""

    status_code = 400
    code = VALIDATION_ERROR
    default_message = "Validation failed"

    def __init__(
        self,
        message: str | None = None,
        *,
        errors: Sequence[Any] = (),
        code: str | None = None,
    ) -> None:
        super().__init__(message, code=code)
        self.errors = list(errors)

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        if self.errors:
            body["details"] = [error.to_dict() for error in self.errors]
        return body


class Unauthorized(ApiError):
    status_code = 401
    code = UNAUTHORIZED
    default_message = "Missing authorization token"


class InvalidToken(Unauthorized):
    code = INVALID_TOKEN
    default_message = "Invalid or malformed token"


class TokenExpired(Unauthorized):
    code = TOKEN_EXPIRED
    default_message = "Token has expired. Please log in again."


class InvalidCredentials(Unauthorized):
    code = INVALID_CREDENTIALS
    default_message = "Invalid email or password"


class NotFound(ApiError):
    status_code = 404
    code = NOT_FOUND
    default_message = "Resource not found"


class Conflict(ApiError):
    status_code = 409
    code = "CONFLICT"
    default_message = "Resource already exists"

    def __init__(self, field: str, *, code: str | None = None) -> None:
        self.field = field
        super().__init__(f"User with this {field} already exists", code=code)


class InternalError(ApiError):
    pass


def error_response(error: ApiError) -> tuple[Response, int]:
    """Wrap an :class:`ApiError` in the failure envelope."""
    return jsonify({"success": False, "error": error.to_dict()}), error.status_code


def _handle_api_error(error: ApiError) -> tuple[Response, int]:
    if error.status_code >= 500:
        logger.error("Request failed: %s", error.message)
    return error_response(error)


def _handle_http_exception(error: HTTPException) -> tuple[Response, int]:
    """
    Translate Werkzeug's HTTP errors (unknown route, bad method, other 400s)
    into the same envelope instead of Flask's HTML pages.
    """
    status_code = error.code or 500
    if isinstance(error, BadRequest):
        api_error: ApiError = ValidationError(error.description or error.name)
    elif status_code == 404:
        api_error = NotFound()
    else:
        api_error = ApiError(error.description or error.name)
        api_error.status_code = status_code
        api_error.code = error.name.upper().replace(" ", "_")
    return error_response(api_error)


def _handle_unexpected(error: Exception) -> tuple[Response, int]:
    logger.exception("Unhandled exception: %s", error)
    return error_response(InternalError())


def register_error_handlers(app: Flask) -> None:
    """Install the envelope-producing handlers on *app*."""
    app.register_error_handler(ApiError, _handle_api_error)
    app.register_error_handler(HTTPException, _handle_http_exception)
    app.register_error_handler(Exception, _handle_unexpected)
