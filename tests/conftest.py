"""
Shared pytest fixtures for the Taskhub test suite.

Provides the Flask application, HTTP client, database session, token
helpers and data factories used by the unit, integration and security
suites.

Key SDET Concepts Demonstrated:
- Fixture scoping (session vs. function) for performance and isolation
- Factory-pattern fixtures for flexible test-data creation
- Automatic teardown / cleanup to prevent test pollution
- Environment variable overrides for deterministic test configuration
"""

from __future__ import annotations

import os
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
import pytest
from faker import Faker

os.environ["FLASK_ENV"] = "testing"
os.environ["TEST_JWT_SECRET_KEY"] = "test-jwt-secret-key-for-local-tests-123456"

from taskhub import create_app, db
from taskhub.auth import get_token_service
from taskhub.models import Account, Task, TaskPriority, TaskStatus
from taskhub.passwords import hash_password
from tests.helpers import DEFAULT_PASSWORD, TEST_HASH_METHOD, auth_headers

fake = Faker()


@pytest.fixture(scope="session")
def app():
    """
    Provide the Flask application instance for the entire test session.

    Creates the app once with the 'testing' config and reuses it across
    all tests to avoid repeated startup overhead.
    """
    application = create_app("testing")
    yield application


@pytest.fixture(scope="function")
def client(app):
    """Provide a Flask test client scoped to a single test function."""
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture(scope="function")
def db_session(app):
    """
    Provide a clean database for each test function.

    Creates all tables before the test, then rolls back any uncommitted
    changes and drops all tables afterward.
    """
    with app.app_context():
        db.create_all()
        yield db
        db.session.rollback()
        db.drop_all()


@pytest.fixture
def account_factory(db_session) -> Callable[..., Account]:
    """
    Provide a factory function that creates and persists Account records.

    Unspecified fields are filled with unique Faker data so several
    accounts can coexist in one test.
    """

    def _create_account(
        *,
        email: str | None = None,
        username: str | None = None,
        password: str = DEFAULT_PASSWORD,
        first_name: str = "Test",
        last_name: str = "User",
    ) -> Account:
        account = Account(
            email=(email or fake.unique.email()).lower(),
            username=username or fake.unique.user_name()[:30].ljust(3, "x"),
            password_hash=hash_password(password, TEST_HASH_METHOD),
            first_name=first_name,
            last_name=last_name,
        )
        db_session.session.add(account)
        db_session.session.commit()
        return account

    return _create_account


@pytest.fixture
def token_for(app) -> Callable[[Account], str]:
    """Issue a valid token for an account through the app's token service."""

    def _token_for(account: Account) -> str:
        return get_token_service().issue(account.id, account.email)

    return _token_for


@pytest.fixture
def expired_token_for(app) -> Callable[[Account], str]:
    """Mint a correctly signed token whose expiry is already in the past."""

    def _expired(account: Account) -> str:
        now = datetime.now(timezone.utc)
        payload: dict[str, Any] = {
            "account_id": account.id,
            "email": account.email,
            "iat": int((now - timedelta(hours=2)).timestamp()),
            "exp": int((now - timedelta(hours=1)).timestamp()),
        }
        return jwt.encode(payload, os.environ["TEST_JWT_SECRET_KEY"], algorithm="HS256")

    return _expired


@pytest.fixture
def user_one(account_factory) -> Account:
    return account_factory(email="one@example.com", username="user_one")


@pytest.fixture
def user_two(account_factory) -> Account:
    return account_factory(email="two@example.com", username="user_two")


@pytest.fixture
def api_headers(user_one, token_for) -> dict[str, str]:
    """Authorization + JSON headers for ``user_one``."""
    return auth_headers(token_for(user_one))


@pytest.fixture
def second_user_headers(user_two, token_for) -> dict[str, str]:
    """Mirror of ``api_headers`` for ``user_two``, used in isolation tests."""
    return auth_headers(token_for(user_two))


@pytest.fixture
def task_factory(db_session, user_one):
    """
    Factory fixture that creates Task rows in the test database.

    Tasks default to being owned by ``user_one``; pass ``owner`` to create
    them for another account.
    """

    def _create_task(
        *,
        owner: Account | None = None,
        title: str | None = None,
        description: str | None = None,
        status: str = TaskStatus.TODO.value,
        priority: str = TaskPriority.MEDIUM.value,
        tags: list[str] | None = None,
        created_at: datetime | None = None,
    ) -> Task:
        task = Task(
            owner_id=(owner or user_one).id,
            title=title or fake.sentence(nb_words=4),
            description=description if description is not None else fake.paragraph(),
            status=status,
            priority=priority,
            tags=tags or [],
        )
        if created_at is not None:
            task.created_at = created_at
        db_session.session.add(task)
        db_session.session.commit()
        return task

    return _create_task


@pytest.fixture
def sample_task(task_factory) -> Task:
    """A single task with known values, owned by ``user_one``."""
    return task_factory(
        title="Sample Task",
        description="This is a sample task for testing",
        status=TaskStatus.TODO.value,
        priority=TaskPriority.MEDIUM.value,
    )


@pytest.fixture
def multiple_tasks(task_factory) -> list[Task]:
    """
    Create a varied set of four tasks for ``user_one``.

    Covers different combinations of status and priority so filter tests
    can run without additional setup.
    """
    base = datetime.now(timezone.utc)
    return [
        task_factory(
            title="High Priority Todo",
            description="Call the plumber",
            status=TaskStatus.TODO.value,
            priority=TaskPriority.HIGH.value,
            created_at=base - timedelta(minutes=4),
        ),
        task_factory(
            title="Medium Priority In Progress",
            description="Write the quarterly report",
            status=TaskStatus.IN_PROGRESS.value,
            priority=TaskPriority.MEDIUM.value,
            created_at=base - timedelta(minutes=3),
        ),
        task_factory(
            title="Low Priority Completed",
            description="Buy groceries",
            status=TaskStatus.COMPLETED.value,
            priority=TaskPriority.LOW.value,
            created_at=base - timedelta(minutes=2),
        ),
        task_factory(
            title="High Priority In Progress",
            description="Fix the leaking roof",
            status=TaskStatus.IN_PROGRESS.value,
            priority=TaskPriority.HIGH.value,
            created_at=base - timedelta(minutes=1),
        ),
    ]


@pytest.fixture
def registration_payload() -> dict[str, str]:
    """A valid registration body."""
    return {
        "email": "new_user@example.com",
        "username": "new_user",
        "password": DEFAULT_PASSWORD,
        "firstName": "New",
        "lastName": "User",
    }
