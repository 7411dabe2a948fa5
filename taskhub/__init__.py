"""
Taskhub API application factory.

Provides the ``create_app`` factory that wires together configuration,
the SQLAlchemy extension, cross-origin access for the browser frontend,
the token service, the JSON error handlers and the API blueprints.  The
factory pattern lets the test suite build an isolated application per
configuration profile.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from flask import Flask
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy

from .config import get_config, load_jwt_secret

# Shared SQLAlchemy instance -- initialised with a concrete app inside create_app()
db = SQLAlchemy()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _ensure_sqlite_db_parent_exists(database_uri: str) -> None:
    """Create parent directories for file-based SQLite URIs when missing."""
    sqlite_prefix = "sqlite:///"
    if not database_uri.startswith(sqlite_prefix):
        return

    sqlite_path = database_uri[len(sqlite_prefix) :].split("?", 1)[0]
    if sqlite_path == ":memory:":
        return

    Path(sqlite_path).parent.mkdir(parents=True, exist_ok=True)


def create_app(config_name: str | None = None) -> Flask:
    """
    Create and configure the Taskhub Flask application.

    Args:
        config_name: The configuration environment to load (``"development"``,
            ``"testing"``, ``"production"``).  When ``None``, the value is
            resolved from the ``FLASK_ENV`` environment variable.

    Returns:
        A configured :class:`~flask.Flask` application with database tables
        created.

    Raises:
        RuntimeError: If no JWT signing secret is configured.
    """
    from .auth import TOKEN_SERVICE_EXTENSION
    from .errors import register_error_handlers
    from .tokens import TokenService, TokenSettings

    app = Flask(__name__, instance_relative_config=True)
    config_class = get_config(config_name)
    app.config.from_object(config_class)

    # Fail at startup, not on the first login, when the secret is missing
    secret = load_jwt_secret(testing=bool(app.config.get("TESTING")))
    app.extensions[TOKEN_SERVICE_EXTENSION] = TokenService(
        TokenSettings.from_config(secret, app.config)
    )

    logger.info("Creating taskhub app with config: %s", config_class.__name__)

    os.makedirs(app.instance_path, exist_ok=True)
    _ensure_sqlite_db_parent_exists(app.config.get("SQLALCHEMY_DATABASE_URI", ""))

    db.init_app(app)
    api_routes = f"{app.config['API_PREFIX'].rstrip('/')}/*"
    CORS(
        app,
        resources={api_routes: {"origins": app.config["FRONTEND_URL"]}},
        supports_credentials=True,
    )
    register_error_handlers(app)

    # Import inside the factory to avoid circular imports -- the route
    # modules reference ``db`` from this package, which must exist first.
    from .routes import register_blueprints

    register_blueprints(app, app.config["API_PREFIX"])

    with app.app_context():
        db.create_all()
        logger.info("Database tables created")

    return app
