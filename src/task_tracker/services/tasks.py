"""Service layer encapsulating task-related operations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.cache import invalidate_task_cache
from ..errors import InvalidCategoryError, TaskNotFoundError
from ..models import Category, Task, TaskPriority, TaskStatus
from ..presenters import total_pages
from ..repositories import CategoryRepository, TaskFilter, TaskRepository, TaskSort

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 10


@dataclass(slots=True)
class TaskPage:
    """One page of an owner's task listing."""

    items: list[Task]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.page_size)


class TaskService:
    """High-level business orchestration for ``Task`` entities."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._repository = TaskRepository(session)
        self._category_repository = CategoryRepository(session)

    @property
    def repository(self) -> TaskRepository:
        """Expose the underlying repository for advanced scenarios."""
        return self._repository

    async def _owned_category(self, owner_id: str, category_id: str) -> Category:
        category = await self._category_repository.get_for_owner(category_id, owner_id)
        if category is None:
            raise InvalidCategoryError()
        return category

    async def _save(self, task: Task) -> Task:
        try:
            await self._repository.add(task)
            await self._repository.commit()
        except IntegrityError as exc:
            # The referenced category vanished after it was checked.
            await self._repository.rollback()
            raise InvalidCategoryError() from exc
        await self._repository.refresh(task)
        await invalidate_task_cache(task.user_id)
        return task

    async def list_tasks(
        self,
        owner_id: str,
        *,
        filters: TaskFilter | None = None,
        sort: TaskSort | None = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> TaskPage:
        """Return one page of the owner's tasks matching ``filters``."""

        page = max(page, 1)
        page_size = min(max(page_size, 1), MAX_PAGE_SIZE)
        items, total = await self._repository.list_paginated(
            owner_id=owner_id,
            filters=filters,
            sort=sort,
            limit=page_size,
            offset=(page - 1) * page_size,
        )
        return TaskPage(items=items, total=total, page=page, page_size=page_size)

    async def get_task(self, owner_id: str, task_id: str) -> Task:
        """Retrieve a task owned by ``owner_id``; foreign tasks read as missing."""
        task = await self._repository.get_for_owner(task_id, owner_id)
        if task is None:
            raise TaskNotFoundError()
        return task

    async def create_task(
        self,
        owner_id: str,
        *,
        title: str,
        description: str | None = None,
        status: TaskStatus = TaskStatus.TODO,
        priority: TaskPriority = TaskPriority.MEDIUM,
        due_date: datetime | None = None,
        category_id: str | None = None,
    ) -> Task:
        """Create a new task belonging to the specified owner."""

        category = await self._owned_category(owner_id, category_id) if category_id else None
        task = Task(
            user_id=owner_id,
            title=title,
            description=description,
            status=status,
            priority=priority,
            due_date=due_date,
            category=category,
        )
        task = await self._save(task)
        logger.info("Task created", extra={"task_id": task.id, "user_id": owner_id})
        return task

    async def update_task(self, owner_id: str, task_id: str, changes: dict[str, Any]) -> Task:
        """Merge ``changes`` into the task; keys absent from ``changes`` stay untouched."""

        task = await self.get_task(owner_id, task_id)
        updates = dict(changes)
        if "category_id" in updates:
            category_id = updates.pop("category_id")
            task.category = await self._owned_category(owner_id, category_id) if category_id else None
        for key, value in updates.items():
            setattr(task, key, value)
        task.touch()
        task = await self._save(task)
        logger.info("Task updated", extra={"task_id": task.id, "fields": sorted(changes)})
        return task

    async def delete_task(self, owner_id: str, task_id: str) -> None:
        task = await self.get_task(owner_id, task_id)
        await self._repository.delete(task)
        await self._repository.commit()
        await invalidate_task_cache(owner_id)
        logger.info("Task deleted", extra={"task_id": task_id, "user_id": owner_id})


__all__ = ["DEFAULT_PAGE_SIZE", "MAX_PAGE_SIZE", "TaskPage", "TaskService"]
