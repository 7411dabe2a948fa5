"""
Input validation for request payloads.

Every validator is a pure, total function: it takes whatever the client
sent (not necessarily a dict) and returns an ordered list of
:class:`FieldError` -- an empty list means the payload is valid.  A field
holding a value of the wrong type counts as invalid for that field; the
validators never raise.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any

from .models import TaskPriority, TaskStatus

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 4


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


def _as_mapping(payload: Any) -> dict[str, Any]:
    return payload if isinstance(payload, dict) else {}


def _is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def is_valid_email(value: Any) -> bool:
    return isinstance(value, str) and EMAIL_PATTERN.match(value) is not None


def password_policy_errors(password: str) -> list[str]:
    """Return the password-policy violations for *password* (length only)."""
    errors = []
    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    return errors


def parse_due_date(value: Any) -> datetime | None:
    """
    Parse an ISO-8601 date or datetime string into an aware UTC datetime.

    Returns ``None`` for empty values; raises ``ValueError`` for anything
    that is not a recognisable ISO-8601 string, or whose UTC equivalent
    falls outside the representable range.  Naive values are taken as UTC.
    """
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError("dueDate must be an ISO-8601 string")
    text = value.strip().replace("Z", "+00:00")
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        day = date.fromisoformat(text)
        parsed = datetime(day.year, day.month, day.day)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError as exc:
        raise ValueError("dueDate is out of range") from exc


def validate_registration(payload: Any) -> list[FieldError]:
    data = _as_mapping(payload)
    errors: list[FieldError] = []

    if not is_valid_email(data.get("email")):
        errors.append(FieldError("email", "Invalid email format"))

    if _is_blank(data.get("username")):
        errors.append(FieldError("username", "Username is required"))

    password = data.get("password")
    if not isinstance(password, str):
        errors.append(FieldError("password", "Password is required"))
    else:
        violations = password_policy_errors(password)
        if violations:
            errors.append(FieldError("password", "; ".join(violations)))

    if _is_blank(data.get("firstName")):
        errors.append(FieldError("firstName", "First name is required"))

    if _is_blank(data.get("lastName")):
        errors.append(FieldError("lastName", "Last name is required"))

    return errors


def validate_login(payload: Any) -> list[FieldError]:
    data = _as_mapping(payload)
    errors: list[FieldError] = []

    if not is_valid_email(data.get("email")):
        errors.append(FieldError("email", "Invalid email format"))

    password = data.get("password")
    if not isinstance(password, str) or not password:
        errors.append(FieldError("password", "Password is required"))

    return errors


def validate_task(payload: Any, *, partial: bool = False) -> list[FieldError]:
    """
    Validate a task payload.

    With ``partial=True`` (used for PATCH) only the fields actually present
    in the payload are checked, so ``{"status": "completed"}`` is valid on
    its own.  Status and priority are checked whenever they carry a value.
    """
    data = _as_mapping(payload)
    errors: list[FieldError] = []

    if (not partial or "title" in data) and _is_blank(data.get("title")):
        errors.append(FieldError("title", "Task title is required"))

    status = data.get("status")
    if status and status not in TaskStatus.values():
        errors.append(FieldError("status", "Invalid status value"))

    priority = data.get("priority")
    if priority and priority not in TaskPriority.values():
        errors.append(FieldError("priority", "Invalid priority value"))

    if "dueDate" in data:
        try:
            parse_due_date(data["dueDate"])
        except ValueError:
            errors.append(
                FieldError("dueDate", "Invalid dueDate format. Use ISO format (YYYY-MM-DD)")
            )

    if "tags" in data and data["tags"] is not None and not isinstance(data["tags"], list):
        errors.append(FieldError("tags", "Tags must be a list of strings"))

    return errors


def validate_profile_update(payload: Any) -> list[FieldError]:
    data = _as_mapping(payload)
    errors: list[FieldError] = []
    for field in ("firstName", "lastName", "profileImage"):
        if field in data and not isinstance(data[field], str):
            errors.append(FieldError(field, f"{field} must be a string"))
    return errors
