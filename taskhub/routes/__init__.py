"""
Route blueprints for the Taskhub API.

- health: liveness probe (public)
- auth: register, login, logout
- profile: read and update the caller's own account
- tasks: CRUD over the caller's tasks
"""

from __future__ import annotations

from typing import Any

from flask import Flask, request

from ..errors import ValidationError


def json_body() -> Any:
    """
    Return the parsed JSON request body, or ``{}`` when the body is empty.

    The body is parsed regardless of the declared content type; anything
    that is not valid JSON raises a 400 ``ValidationError``.
    """
    if not request.get_data(cache=True):
        return {}
    payload = request.get_json(force=True, silent=True)
    if payload is None:
        raise ValidationError("Invalid JSON in request body")
    return payload


def register_blueprints(app: Flask, prefix: str) -> None:
    from .auth import auth_bp
    from .health import health_bp
    from .profile import profile_bp
    from .tasks import tasks_bp

    prefix = prefix.rstrip("/")
    app.register_blueprint(health_bp, url_prefix=prefix)
    app.register_blueprint(auth_bp, url_prefix=f"{prefix}/auth")
    app.register_blueprint(profile_bp, url_prefix=f"{prefix}/profile")
    app.register_blueprint(tasks_bp, url_prefix=f"{prefix}/tasks")
