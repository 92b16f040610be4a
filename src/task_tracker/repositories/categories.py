"""Repository for user-owned categories."""

from __future__ import annotations

from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import Category
from .base import BaseRepository, persistence_errors


class CategoryRepository(BaseRepository[Category]):
    """Concrete repository for ``Category`` entities, always scoped to an owner."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Category)

    async def list_for_owner(self, owner_id: str) -> list[Category]:
        """Return the owner's categories ordered by name."""
        statement = (
            select(Category)
            .where(Category.user_id == owner_id)
            .order_by(col(Category.name).asc(), col(Category.id).asc())
        )
        with persistence_errors():
            result = await self.session.exec(statement)
            return list(result.all())

    async def get_for_owner(self, category_id: str, owner_id: str) -> Category | None:
        statement = select(Category).where(Category.id == category_id, Category.user_id == owner_id)
        with persistence_errors():
            result = await self.session.exec(statement)
            return result.first()

    async def get_by_name(
        self,
        owner_id: str,
        name: str,
        *,
        exclude_id: str | None = None,
    ) -> Category | None:
        """Return the owner's category called ``name``, skipping ``exclude_id``."""
        statement = select(Category).where(Category.user_id == owner_id, Category.name == name)
        if exclude_id is not None:
            statement = statement.where(Category.id != exclude_id)
        with persistence_errors():
            result = await self.session.exec(statement)
            return result.first()
