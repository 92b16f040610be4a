"""Service layer encapsulating category operations."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.cache import invalidate_task_cache
from ..errors import CategoryInUseError, CategoryNotFoundError, DuplicateCategoryNameError
from ..models import Category
from ..repositories import CategoryRepository, TaskRepository

logger = logging.getLogger(__name__)


class CategoryService:
    """Owner-scoped category management with per-owner unique names."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._repository = CategoryRepository(session)
        self._task_repository = TaskRepository(session)

    @property
    def repository(self) -> CategoryRepository:
        return self._repository

    async def _persist(self, category: Category) -> Category:
        try:
            await self._repository.add(category)
            await self._repository.commit()
        except IntegrityError as exc:
            await self._repository.rollback()
            raise DuplicateCategoryNameError() from exc
        await self._repository.refresh(category)
        return category

    async def list_categories(self, owner_id: str) -> list[Category]:
        return await self._repository.list_for_owner(owner_id)

    async def get_category(self, owner_id: str, category_id: str) -> Category:
        """Return the category or raise ``CategoryNotFoundError``, also for foreign ids."""
        category = await self._repository.get_for_owner(category_id, owner_id)
        if category is None:
            raise CategoryNotFoundError()
        return category

    async def create_category(self, owner_id: str, name: str) -> Category:
        if await self._repository.get_by_name(owner_id, name) is not None:
            raise DuplicateCategoryNameError()
        category = await self._persist(Category(name=name, user_id=owner_id))
        await invalidate_task_cache(owner_id)
        logger.info("Category created", extra={"category_id": category.id, "user_id": owner_id})
        return category

    async def rename_category(self, owner_id: str, category_id: str, name: str) -> Category:
        category = await self.get_category(owner_id, category_id)
        if category.name == name:
            return category
        if await self._repository.get_by_name(owner_id, name, exclude_id=category_id) is not None:
            raise DuplicateCategoryNameError()
        category.name = name
        category.touch()
        category = await self._persist(category)
        await invalidate_task_cache(owner_id)
        logger.info("Category renamed", extra={"category_id": category.id, "user_id": owner_id})
        return category

    async def delete_category(self, owner_id: str, category_id: str) -> None:
        """Delete an unreferenced category.

        Raises ``CategoryInUseError`` carrying the number of referencing tasks
        instead of cascading.
        """

        category = await self.get_category(owner_id, category_id)
        task_count = await self._task_repository.count_for_category(category.id)
        if task_count > 0:
            logger.info(
                "Category deletion rejected",
                extra={"category_id": category.id, "task_count": task_count},
            )
            raise CategoryInUseError(task_count)

        try:
            await self._repository.delete(category)
            await self._repository.commit()
        except IntegrityError as exc:
            # A task referenced the category between the count and the delete.
            await self._repository.rollback()
            raise CategoryInUseError(await self._task_repository.count_for_category(category_id)) from exc
        await invalidate_task_cache(owner_id)
        logger.info("Category deleted", extra={"category_id": category_id, "user_id": owner_id})


__all__ = ["CategoryService"]
