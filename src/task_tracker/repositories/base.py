"""Base repository implementation supporting asynchronous SQLModel sessions."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Generic, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from ..errors import PersistenceFailureError

ModelType = TypeVar("ModelType", bound=SQLModel)

logger = logging.getLogger(__name__)


@contextmanager
def persistence_errors() -> Iterator[None]:
    """Re-raise storage failures as ``PersistenceFailureError``.

    Integrity violations pass through untouched so services can map them to
    domain conflicts.
    """

    try:
        yield
    except IntegrityError:
        raise
    except SQLAlchemyError as exc:
        logger.error("Database operation failed", exc_info=exc)
        raise PersistenceFailureError() from exc


class BaseRepository(Generic[ModelType]):
    """Provide shared persistence helpers for repositories."""

    def __init__(self, session: AsyncSession, model_type: type[ModelType]) -> None:
        self._session = session
        self._model_type = model_type

    @property
    def session(self) -> AsyncSession:
        """Return the session associated with the repository."""
        return self._session

    async def get(self, entity_id: str) -> ModelType | None:
        """Retrieve a model instance by its primary key."""
        with persistence_errors():
            return await self._session.get(self._model_type, entity_id)

    async def add(self, instance: ModelType) -> ModelType:
        """Add and flush a new entity instance."""
        with persistence_errors():
            self._session.add(instance)
            await self._session.flush()
        return instance

    async def delete(self, instance: ModelType) -> None:
        """Delete an entity instance and flush the change."""
        with persistence_errors():
            await self._session.delete(instance)
            await self._session.flush()

    async def refresh(self, instance: ModelType) -> ModelType:
        """Refresh an entity from the database and return it."""
        with persistence_errors():
            await self._session.refresh(instance)
        return instance

    async def commit(self) -> None:
        with persistence_errors():
            await self._session.commit()

    async def rollback(self) -> None:
        with persistence_errors():
            await self._session.rollback()


__all__ = ["BaseRepository", "persistence_errors"]
