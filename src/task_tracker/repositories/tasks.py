"""Repository for task persistence, filtering, and ordering."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

import sqlalchemy as sa
from sqlmodel import col, func, or_, select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import Task, TaskPriority, TaskStatus
from .base import BaseRepository, persistence_errors

_PRIORITY_RANK = {TaskPriority.LOW: 0, TaskPriority.MEDIUM: 1, TaskPriority.HIGH: 2}
_STATUS_RANK = {TaskStatus.TODO: 0, TaskStatus.IN_PROGRESS: 1, TaskStatus.COMPLETED: 2}


class TaskSortField(str, Enum):
    """Columns a task listing may be ordered by."""

    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    TITLE = "title"
    DUE_DATE = "due_date"
    PRIORITY = "priority"
    STATUS = "status"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True, slots=True)
class TaskFilter:
    """Optional narrowing criteria; ``None`` fields do not filter."""

    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    category_id: str | None = None
    search: str | None = None


@dataclass(frozen=True, slots=True)
class TaskSort:
    field: TaskSortField = TaskSortField.CREATED_AT
    order: SortOrder = SortOrder.DESC


def _conditions(owner_id: str, filters: TaskFilter) -> list[Any]:
    conditions: list[Any] = [col(Task.user_id) == owner_id]
    if filters.status is not None:
        conditions.append(col(Task.status) == filters.status)
    if filters.priority is not None:
        conditions.append(col(Task.priority) == filters.priority)
    if filters.category_id is not None:
        conditions.append(col(Task.category_id) == filters.category_id)
    if filters.search:
        conditions.append(
            or_(
                col(Task.title).icontains(filters.search, autoescape=True),
                col(Task.description).icontains(filters.search, autoescape=True),
            )
        )
    return conditions


def _order_by(sort: TaskSort) -> list[Any]:
    ascending = sort.order is SortOrder.ASC
    clauses: list[Any] = []

    if sort.field is TaskSortField.PRIORITY:
        expression: Any = sa.case(_PRIORITY_RANK, value=col(Task.priority))
    elif sort.field is TaskSortField.STATUS:
        expression = sa.case(_STATUS_RANK, value=col(Task.status))
    elif sort.field is TaskSortField.DUE_DATE:
        # Undated tasks go last in both directions.
        clauses.append(sa.case((col(Task.due_date).is_(None), 1), else_=0))
        expression = col(Task.due_date)
    else:
        expression = col(getattr(Task, sort.field.value))

    clauses.append(expression.asc() if ascending else expression.desc())
    clauses.append(col(Task.id).asc())
    return clauses


class TaskRepository(BaseRepository[Task]):
    """Concrete repository for ``Task`` entities, always scoped to an owner."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Task)

    async def refresh(self, instance: Task) -> Task:
        """Reload column state and the category reference."""
        with persistence_errors():
            await self.session.refresh(instance)
            await self.session.refresh(instance, attribute_names=["category"])
        return instance

    async def get_for_owner(self, task_id: str, owner_id: str) -> Task | None:
        """Return the task only if ``owner_id`` owns it."""
        statement = select(Task).where(Task.id == task_id, Task.user_id == owner_id)
        with persistence_errors():
            result = await self.session.exec(statement)
            return result.first()

    async def list_paginated(
        self,
        *,
        owner_id: str,
        filters: TaskFilter | None = None,
        sort: TaskSort | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> tuple[list[Task], int]:
        """Return one page of the owner's matching tasks and the total match count."""

        conditions = _conditions(owner_id, filters or TaskFilter())
        statement = (
            select(Task)
            .where(*conditions)
            .order_by(*_order_by(sort or TaskSort()))
            .offset(offset)
            .limit(limit)
        )
        count_statement = select(func.count()).select_from(Task).where(*conditions)

        with persistence_errors():
            result = await self.session.exec(statement)
            tasks = list(result.all())
            total = (await self.session.exec(count_statement)).one()
        return tasks, int(total)

    async def count_for_category(self, category_id: str) -> int:
        """Return how many tasks reference ``category_id``."""
        statement = select(func.count()).select_from(Task).where(Task.category_id == category_id)
        with persistence_errors():
            total = (await self.session.exec(statement)).one()
        return int(total)


__all__ = ["SortOrder", "TaskFilter", "TaskRepository", "TaskSort", "TaskSortField"]
