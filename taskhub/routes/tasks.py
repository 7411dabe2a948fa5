"""
Task endpoints.

All endpoints require a Bearer token and operate only on the caller's own
tasks.

Endpoints:
    POST   /tasks        -- Create a task.
    GET    /tasks        -- List tasks (page, limit, status, priority, search).
    GET    /tasks/<id>   -- Retrieve one task.
    PATCH  /tasks/<id>   -- Partially update a task.
    DELETE /tasks/<id>   -- Delete a task.
"""

from __future__ import annotations

import logging

from flask import Blueprint, Response, request

from ..auth import require_auth
from ..responses import success
from ..services import tasks as task_service
from ..tokens import Claims
from . import json_body

logger = logging.getLogger(__name__)

tasks_bp = Blueprint("tasks", __name__)


@tasks_bp.route("", methods=["POST"])
@require_auth
def create_task(identity: Claims) -> tuple[Response, int]:
    task = task_service.create_task(identity.account_id, json_body())
    return success(task, message="Task created successfully", status_code=201)


@tasks_bp.route("", methods=["GET"])
@require_auth
def list_tasks(identity: Claims) -> tuple[Response, int]:
    """
    List the caller's tasks, newest first.

    Query parameters: ``page``, ``limit``, ``status``, ``priority``,
    ``search``.  Pagination metadata is returned alongside the page.
    """
    logger.info("Listing tasks for account_id=%s", identity.account_id)
    items, pagination = task_service.list_tasks(identity.account_id, request.args)
    return success(items, pagination=pagination)


@tasks_bp.route("/<int:task_id>", methods=["GET"])
@require_auth
def get_task(task_id: int, identity: Claims) -> tuple[Response, int]:
    return success(task_service.get_task(identity.account_id, task_id))


@tasks_bp.route("/<int:task_id>", methods=["PATCH"])
@require_auth
def update_task(task_id: int, identity: Claims) -> tuple[Response, int]:
    task = task_service.update_task(identity.account_id, task_id, json_body())
    return success(task, message="Task updated successfully")


@tasks_bp.route("/<int:task_id>", methods=["DELETE"])
@require_auth
def delete_task(task_id: int, identity: Claims) -> tuple[Response, int]:
    task_service.delete_task(identity.account_id, task_id)
    return success(message="Task deleted successfully")
