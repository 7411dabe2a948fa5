"""
Database models for the Taskhub API.

Defines the two persisted entities: :class:`Account` (credentials and
profile) and :class:`Task` (a to-do item owned by exactly one account).

Key Concepts Demonstrated:
- SQLAlchemy declarative models with explicit table constraints
- ``str, Enum`` inheritance for JSON-friendly enumeration values
- Timezone-aware datetime handling for SQLite compatibility
- Safe serialisation that never exposes the password hash
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from . import db


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_utc_iso(value: datetime | None) -> str | None:
    """
    Serialise a datetime to an ISO-8601 UTC string.

    SQLite does not store timezone information, so datetimes read back from
    the database may be naive even though they were created in UTC.  Naive
    values are assumed to be UTC; aware values are converted.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat()


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class Account(db.Model):
    """
    A registered user.

    ``email`` is always stored lower-cased, which makes the unique index
    case-insensitive in practice.  ``password_hash`` is never included in
    any serialised form.
    """

    __tablename__ = "accounts"

    __table_args__ = (
        db.CheckConstraint(
            "length(username) >= 3 AND length(username) <= 30",
            name="ck_accounts_username_len",
        ),
        db.CheckConstraint("length(email) <= 254", name="ck_accounts_email_len"),
    )

    id: int = db.Column(db.Integer, primary_key=True)
    email: str = db.Column(db.String(254), unique=True, nullable=False, index=True)
    username: str = db.Column(db.String(30), unique=True, nullable=False, index=True)
    password_hash: str = db.Column(db.String(256), nullable=False)
    first_name: str = db.Column(db.String(100), nullable=False)
    last_name: str = db.Column(db.String(100), nullable=False)
    profile_image: str | None = db.Column(db.Text, nullable=True)
    created_at: datetime = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at: datetime = db.Column(
        db.DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    def to_public_dict(self) -> dict[str, Any]:
        """The minimal identity returned by register and login."""
        return {"id": self.id, "email": self.email, "username": self.username}

    def to_dict(self) -> dict[str, Any]:
        """Full profile representation, still without the password hash."""
        return {
            "id": self.id,
            "email": self.email,
            "username": self.username,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "profileImage": self.profile_image,
            "createdAt": to_utc_iso(self.created_at),
            "updatedAt": to_utc_iso(self.updated_at),
        }

    def __repr__(self) -> str:
        return f"<Account {self.id}: {self.username}>"


class Task(db.Model):
    """
    Task owned by a single account.

    ``owner_id`` is set once at creation; every query in the service layer
    filters by it so one account can never see or touch another's tasks.
    """

    __tablename__ = "tasks"

    __table_args__ = (
        db.Index("ix_tasks_owner_created", "owner_id", "created_at"),
        db.Index("ix_tasks_owner_status", "owner_id", "status"),
        db.Index("ix_tasks_owner_priority", "owner_id", "priority"),
    )

    id: int = db.Column(db.Integer, primary_key=True)
    owner_id: int = db.Column(db.Integer, db.ForeignKey("accounts.id"), nullable=False)
    title: str = db.Column(db.String(200), nullable=False)
    description: str = db.Column(db.Text, nullable=False, default="")
    status: str = db.Column(db.String(20), nullable=False, default=TaskStatus.TODO.value)
    priority: str = db.Column(db.String(20), nullable=False, default=TaskPriority.MEDIUM.value)
    due_date: datetime | None = db.Column(db.DateTime(timezone=True), nullable=True)
    tags: list = db.Column(db.JSON, nullable=False, default=list)
    created_at: datetime = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at: datetime = db.Column(
        db.DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "ownerId": self.owner_id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "priority": self.priority,
            "dueDate": to_utc_iso(self.due_date),
            "tags": list(self.tags or []),
            "createdAt": to_utc_iso(self.created_at),
            "updatedAt": to_utc_iso(self.updated_at),
        }

    def __repr__(self) -> str:
        return f"<Task {self.id}: {self.title}>"
