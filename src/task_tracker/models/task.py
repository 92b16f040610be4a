"""Task domain models built with SQLModel."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

import sqlalchemy as sa
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship

from .common import ID_LENGTH, TimestampMixin, UTCDateTime, id_column, new_id

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from .category import Category

TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 1000


class TaskStatus(str, Enum):
    """Enumeration of possible task states, in workflow order."""

    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class TaskPriority(str, Enum):
    """Enumeration of task priorities, lowest first."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class Task(TimestampMixin, table=True):
    """Persistent task model."""

    __tablename__ = "tasks"
    __table_args__ = (
        sa.Index("ix_tasks_user_id_status", "user_id", "status"),
        sa.Index("ix_tasks_user_id_category_id", "user_id", "category_id"),
        sa.Index("ix_tasks_user_id_due_date", "user_id", "due_date"),
    )

    id: str = Field(default_factory=new_id, sa_column=id_column())
    title: str = Field(
        max_length=TITLE_MAX_LENGTH,
        sa_column=sa.Column(sa.String(length=TITLE_MAX_LENGTH), nullable=False),
    )
    description: str | None = Field(
        default=None,
        sa_column=sa.Column(sa.Text(), nullable=True),
    )
    status: TaskStatus = Field(
        default=TaskStatus.TODO,
        sa_column=sa.Column(
            sa.Enum(TaskStatus, name="task_status", native_enum=False, validate_strings=True),
            nullable=False,
            server_default=TaskStatus.TODO.value,
        ),
    )
    priority: TaskPriority = Field(
        default=TaskPriority.MEDIUM,
        sa_column=sa.Column(
            sa.Enum(TaskPriority, name="task_priority", native_enum=False, validate_strings=True),
            nullable=False,
            server_default=TaskPriority.MEDIUM.value,
        ),
    )
    due_date: datetime | None = Field(
        default=None,
        sa_column=sa.Column(UTCDateTime(), nullable=True),
    )
    category_id: str | None = Field(
        default=None,
        sa_column=sa.Column(
            sa.String(length=ID_LENGTH),
            sa.ForeignKey("categories.id", ondelete="RESTRICT"),
            nullable=True,
        ),
    )
    user_id: str = Field(
        sa_column=sa.Column(
            sa.String(length=ID_LENGTH),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
    )
    category: "Category | None" = Relationship(
        sa_relationship=relationship("Category", lazy="selectin"),
    )


__all__ = [
    "DESCRIPTION_MAX_LENGTH",
    "TITLE_MAX_LENGTH",
    "TITLE_MIN_LENGTH",
    "Task",
    "TaskPriority",
    "TaskStatus",
]
