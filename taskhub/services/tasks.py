"""
Task CRUD and listing, always scoped to the owning account.

Every query starts from :func:`_owned_tasks`, so a task that belongs to a
different account is indistinguishable from one that does not exist: both
raise :class:`NotFound`.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping

from sqlalchemy import and_, func, or_, select
from sqlalchemy.sql import Select

from .. import db
from ..errors import TASK_NOT_FOUND, NotFound, ValidationError
from ..models import Task, TaskPriority, TaskStatus
from ..sanitization import sanitize_string, sanitize_tags
from ..validators import FieldError, parse_due_date, validate_task

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
MAX_TITLE_LENGTH = 200


def _owned_tasks(owner_id: int) -> Select:
    # Tenant isolation: only rows belonging to the authenticated account
    return select(Task).where(Task.owner_id == owner_id)


def _get_owned(owner_id: int, task_id: int) -> Task:
    task = db.session.scalar(_owned_tasks(owner_id).where(Task.id == task_id))
    if task is None:
        raise NotFound("Task not found", code=TASK_NOT_FOUND)
    return task


def _escape_like(term: str) -> str:
    """Escape LIKE wildcards so a search term only matches itself."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _clean_title(value: Any) -> str:
    title = sanitize_string(value)
    if not title:
        raise ValidationError(errors=[FieldError("title", "Task title is required")])
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(
            errors=[
                FieldError("title", f"Title must be {MAX_TITLE_LENGTH} characters or less")
            ]
        )
    return title


def _parse_positive_int(value: Any, default: int) -> int:
    """Parse a query-string integer; unparsable or zero values give *default*."""
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed or default


def create_task(owner_id: int, payload: Any) -> dict[str, Any]:
    """
    Validate, sanitise and store a new task for *owner_id*.

    Omitted ``status``/``priority`` fall back to ``todo``/``medium``.
    """
    errors = validate_task(payload)
    if errors:
        raise ValidationError(errors=errors)

    task = Task(
        owner_id=owner_id,
        title=_clean_title(payload["title"]),
        description=sanitize_string(payload.get("description")),
        status=payload.get("status") or TaskStatus.TODO.value,
        priority=payload.get("priority") or TaskPriority.MEDIUM.value,
        due_date=parse_due_date(payload.get("dueDate")),
        tags=sanitize_tags(payload.get("tags")),
    )
    db.session.add(task)
    db.session.commit()
    logger.info("Created task id=%s for owner_id=%s", task.id, owner_id)
    return task.to_dict()


def list_tasks(
    owner_id: int, query: Mapping[str, Any]
) -> tuple[list[dict[str, Any]], dict[str, int]]:
    """
    Return one page of *owner_id*'s tasks plus pagination metadata.

    Supported query keys: ``page`` (default 1), ``limit`` (default 10,
    clamped to 1..100), exact-match ``status`` and ``priority``, and
    ``search``, which matches any of its whitespace-separated terms
    case-insensitively against the title or description.  Results are
    newest first.
    """
    page = max(1, _parse_positive_int(query.get("page"), DEFAULT_PAGE))
    limit = max(1, min(MAX_LIMIT, _parse_positive_int(query.get("limit"), DEFAULT_LIMIT)))

    conditions = [Task.owner_id == owner_id]

    status = query.get("status")
    if status:
        conditions.append(Task.status == status)

    priority = query.get("priority")
    if priority:
        conditions.append(Task.priority == priority)

    search = query.get("search")
    if isinstance(search, str) and search.split():
        term_matches = []
        for term in search.split():
            pattern = f"%{_escape_like(term.lower())}%"
            term_matches.append(func.lower(Task.title).like(pattern, escape="\\"))
            term_matches.append(func.lower(Task.description).like(pattern, escape="\\"))
        conditions.append(or_(*term_matches))

    where_clause = and_(*conditions)
    total = db.session.scalar(select(func.count()).select_from(Task).where(where_clause))
    offset = (page - 1) * limit
    # Pages past the end are empty; the offset may not even fit an SQL integer
    tasks = []
    if offset < total:
        tasks = db.session.scalars(
            select(Task)
            .where(where_clause)
            .order_by(Task.created_at.desc(), Task.id.desc())
            .offset(offset)
            .limit(limit)
        ).all()

    pagination = {
        "total": total,
        "page": page,
        "pages": math.ceil(total / limit),
        "limit": limit,
    }
    return [task.to_dict() for task in tasks], pagination


def get_task(owner_id: int, task_id: int) -> dict[str, Any]:
    return _get_owned(owner_id, task_id).to_dict()


def update_task(owner_id: int, task_id: int, payload: Any) -> dict[str, Any]:
    """
    Apply the fields present in *payload* to one of *owner_id*'s tasks.

    Absent fields are left untouched, and only present fields are
    validated.  Ownership is never changed by an update.
    """
    errors = validate_task(payload, partial=True)
    if errors:
        raise ValidationError(errors=errors)

    data = payload if isinstance(payload, dict) else {}
    task = _get_owned(owner_id, task_id)

    if "title" in data:
        task.title = _clean_title(data["title"])
    if "description" in data:
        task.description = sanitize_string(data["description"])
    if data.get("status"):
        task.status = data["status"]
    if data.get("priority"):
        task.priority = data["priority"]
    if "dueDate" in data:
        task.due_date = parse_due_date(data["dueDate"])
    if "tags" in data:
        task.tags = sanitize_tags(data["tags"])

    db.session.commit()
    return task.to_dict()


def delete_task(owner_id: int, task_id: int) -> None:
    """Delete one of *owner_id*'s tasks; a repeated delete raises NotFound."""
    task = _get_owned(owner_id, task_id)
    db.session.delete(task)
    db.session.commit()
    logger.info("Deleted task id=%s for owner_id=%s", task_id, owner_id)
