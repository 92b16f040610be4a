"""Domain models exposed by the task tracker."""

from __future__ import annotations

from .category import Category
from .common import TimestampMixin
from .task import Task, TaskPriority, TaskStatus
from .user import User, UserRole

__all__ = [
    "Category",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "TimestampMixin",
    "User",
    "UserRole",
]
