"""Shape persisted records into the client-facing response schemas."""

from __future__ import annotations

from math import ceil

from .models import Category, Task, User
from .schemas.category import CategoryRead, CategoryRef
from .schemas.task import TaskListResponse, TaskRead
from .schemas.user import UserPublic


def present_category(category: Category) -> CategoryRead:
    return CategoryRead(
        id=category.id,
        name=category.name,
        created_at=category.created_at,
        updated_at=category.updated_at,
    )


def present_task(task: Task) -> TaskRead:
    """Render a task with its category collapsed to ``{id, name}``."""

    category = task.category
    return TaskRead(
        id=task.id,
        title=task.title,
        description=task.description,
        status=task.status,
        priority=task.priority,
        due_date=task.due_date,
        category=CategoryRef(id=category.id, name=category.name) if category is not None else None,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


def total_pages(total: int, page_size: int) -> int:
    return ceil(total / page_size) if total else 0


def present_task_page(tasks: list[Task], *, total: int, page: int, page_size: int) -> TaskListResponse:
    return TaskListResponse(
        items=[present_task(task) for task in tasks],
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages(total, page_size),
    )


def present_user(user: User) -> UserPublic:
    return UserPublic.model_validate(user)


__all__ = ["present_category", "present_task", "present_task_page", "present_user", "total_pages"]
