"""
Configuration for the Taskhub API.

Follows Flask's recommended pattern: a shared ``Config`` base class holds
defaults, and environment-specific subclasses (``DevelopmentConfig``,
``TestingConfig``, ``ProductionConfig``) override only what differs.  The
``get_config`` factory resolves the correct class at runtime from the
``FLASK_ENV`` environment variable or an explicit argument.

The JWT signing secret is deliberately *not* given a default: the
application refuses to start without one (see ``load_jwt_secret``).
"""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _load_secret(raw_env_var: str, path_env_var: str) -> str:
    """
    Load a signing secret from a raw environment variable or a file path.

    The raw variable takes precedence over the path variable so
    orchestrators can inject secrets directly without mounting files.
    """
    raw_secret = os.environ.get(raw_env_var, "").strip()
    if raw_secret:
        return raw_secret

    secret_path = os.environ.get(path_env_var, "").strip()
    if secret_path:
        try:
            secret = Path(secret_path).read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise RuntimeError(
                f"Unable to read JWT secret file at '{secret_path}' from {path_env_var}."
            ) from exc
        if secret:
            return secret

    raise RuntimeError(
        f"Missing JWT secret configuration: set {raw_env_var} or {path_env_var}."
    )


def _has_secret_source(raw_env_var: str, path_env_var: str) -> bool:
    """Return True when at least one secret source variable is configured."""
    return bool(
        os.environ.get(raw_env_var, "").strip()
        or os.environ.get(path_env_var, "").strip()
    )


def load_jwt_secret(*, testing: bool) -> str:
    """
    Resolve the token signing secret for the selected environment.

    In testing mode, ``TEST_JWT_SECRET_KEY`` / ``TEST_JWT_SECRET_KEY_PATH``
    are used when configured; otherwise it falls back to the standard
    ``JWT_SECRET_KEY`` / ``JWT_SECRET_KEY_PATH`` variables.

    Raises:
        RuntimeError: If no secret source is configured or readable.
    """
    if testing and _has_secret_source("TEST_JWT_SECRET_KEY", "TEST_JWT_SECRET_KEY_PATH"):
        return _load_secret("TEST_JWT_SECRET_KEY", "TEST_JWT_SECRET_KEY_PATH")
    return _load_secret("JWT_SECRET_KEY", "JWT_SECRET_KEY_PATH")


class Config:
    """
    Base configuration shared by all environments.

    Every setting can be controlled via an environment variable so that
    container orchestrators can inject values at deploy time.
    """

    SECRET_KEY: str = os.environ.get(
        "SECRET_KEY", "taskhub-dev-secret-change-in-production"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False
    SQLALCHEMY_DATABASE_URI: str = os.environ.get(
        "DATABASE_URL",
        f"sqlite:///{BASE_DIR / 'instance' / 'taskhub.db'}",
    )

    # All blueprints are mounted below this versioned prefix
    API_PREFIX: str = os.environ.get("API_PREFIX", "/api/v1")

    # Browser origin allowed to call the API with credentials
    FRONTEND_URL: str = os.environ.get("FRONTEND_URL", "http://localhost:3000")

    # How many hours a newly issued token remains valid before expiring
    JWT_EXPIRY_HOURS: int = int(os.environ.get("JWT_EXPIRY_HOURS", "24"))
    # Issuer and verifier are the same process, so no skew is tolerated by default
    JWT_CLOCK_SKEW_SECONDS: int = int(os.environ.get("JWT_CLOCK_SKEW_SECONDS", "0"))
    JWT_ALGORITHM: str = "HS256"

    # Werkzeug hash method string; the iteration count is the work factor
    PASSWORD_HASH_METHOD: str = os.environ.get(
        "PASSWORD_HASH_METHOD", "pbkdf2:sha256:600000"
    )


class DevelopmentConfig(Config):
    """Local development: debug on, Flask error handlers behave normally."""

    DEBUG: bool = True
    TESTING: bool = False


class TestingConfig(Config):
    """
    Configuration for the automated test suite.

    Uses an in-memory SQLite database so test runs never touch development
    data, and a cheap hash work factor so registration-heavy tests stay fast.
    """

    DEBUG: bool = True
    TESTING: bool = True
    SQLALCHEMY_DATABASE_URI: str = os.environ.get(
        "TEST_DATABASE_URL", "sqlite:///:memory:"
    )
    SQLALCHEMY_ENGINE_OPTIONS: dict = {"pool_pre_ping": True}
    JWT_EXPIRY_HOURS: int = int(os.environ.get("TEST_JWT_EXPIRY_HOURS", "1"))
    PASSWORD_HASH_METHOD: str = "pbkdf2:sha256:1000"


class ProductionConfig(Config):
    """
    Configuration for production deployments.

    All secrets must be supplied through environment variables.
    """

    DEBUG: bool = False
    TESTING: bool = False


config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Resolve a configuration class by environment name.

    Args:
        env: One of ``"development"``, ``"testing"``, or ``"production"``.
            When ``None``, the ``FLASK_ENV`` environment variable is
            consulted, falling back to ``"development"``.

    Returns:
        The configuration class (not an instance).  Unrecognised names
        resolve to ``DevelopmentConfig``.
    """
    if env is None:
        env = os.environ.get("FLASK_ENV", "development")
    return config.get(env, config["default"])
