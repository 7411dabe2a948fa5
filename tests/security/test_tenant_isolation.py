"""
Security tests for owner scoping of tasks.

Verifies that one account can never read, list, modify or delete another
account's tasks, and that a foreign task is indistinguishable from a
missing one.

Key SDET Concepts Demonstrated:
- Horizontal privilege-escalation probes (OWASP A01 - Broken Access Control)
- Response-equality assertions to rule out information leaks
"""

from __future__ import annotations

import pytest

from tests.helpers import API

pytestmark = pytest.mark.security


@pytest.fixture
def foreign_task(task_factory, user_two):
    return task_factory(owner=user_two, title="Second user's secret", status="todo")


def test_list_never_includes_other_accounts_tasks(
    client, db_session, multiple_tasks, foreign_task, api_headers
):
    """Test that listing with any filter stays within the caller's tasks."""
    for query in ("", "?status=todo", "?priority=medium", "?search=secret", "?limit=100"):
        # Act
        body = client.get(f"{API}/tasks{query}", headers=api_headers).get_json()

        # Assert
        assert foreign_task.id not in {task["id"] for task in body["data"]}


def test_other_account_sees_only_its_own(
    client, db_session, multiple_tasks, foreign_task, second_user_headers
):
    """Test the mirror view from the second account."""
    # Act
    body = client.get(f"{API}/tasks", headers=second_user_headers).get_json()

    # Assert
    assert [task["id"] for task in body["data"]] == [foreign_task.id]
    assert body["pagination"]["total"] == 1


def test_foreign_task_is_indistinguishable_from_missing(
    client, db_session, foreign_task, api_headers
):
    """Test that GET on another account's task looks exactly like a missing id."""
    # Act
    foreign = client.get(f"{API}/tasks/{foreign_task.id}", headers=api_headers)
    missing = client.get(f"{API}/tasks/987654", headers=api_headers)

    # Assert
    assert foreign.status_code == missing.status_code == 404
    assert foreign.get_json() == missing.get_json()


def test_cannot_update_foreign_task(client, db_session, foreign_task, api_headers):
    """Test that PATCH on another account's task is a 404 and changes nothing."""
    # Act
    response = client.patch(
        f"{API}/tasks/{foreign_task.id}", json={"title": "Hijacked"}, headers=api_headers
    )
    db_session.session.refresh(foreign_task)

    # Assert
    assert response.status_code == 404
    assert foreign_task.title == "Second user's secret"


def test_cannot_delete_foreign_task(
    client, db_session, foreign_task, api_headers, second_user_headers
):
    """Test that DELETE on another account's task is a 404 and the task survives."""
    # Act
    response = client.delete(f"{API}/tasks/{foreign_task.id}", headers=api_headers)
    still_there = client.get(f"{API}/tasks/{foreign_task.id}", headers=second_user_headers)

    # Assert
    assert response.status_code == 404
    assert still_there.status_code == 200
