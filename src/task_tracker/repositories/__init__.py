"""Database repositories for encapsulating persistence logic."""

from __future__ import annotations

from .categories import CategoryRepository
from .tasks import SortOrder, TaskFilter, TaskRepository, TaskSort, TaskSortField
from .users import UserRepository

__all__ = [
    "CategoryRepository",
    "SortOrder",
    "TaskFilter",
    "TaskRepository",
    "TaskSort",
    "TaskSortField",
    "UserRepository",
]
