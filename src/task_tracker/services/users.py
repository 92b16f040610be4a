"""Service layer for reading and updating the caller's profile."""

from __future__ import annotations

import logging
from typing import Any

from sqlmodel.ext.asyncio.session import AsyncSession

from ..errors import NotFoundError
from ..models import User
from ..repositories import UserRepository

logger = logging.getLogger(__name__)

_MUTABLE_PROFILE_FIELDS = frozenset({"name", "image"})


class UserService:
    """High-level business operations for ``User`` entities."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._repository = UserRepository(session)

    @property
    def repository(self) -> UserRepository:
        """Expose the underlying repository for advanced scenarios."""
        return self._repository

    async def get_user(self, user_id: str) -> User:
        """Fetch a user by primary key."""
        user = await self._repository.get(user_id)
        if user is None:
            raise NotFoundError("User not found.", code="user_not_found")
        return user

    async def update_profile(self, user_id: str, changes: dict[str, Any]) -> User:
        """Apply ``name``/``image`` changes; ``image=None`` clears the avatar."""

        user = await self.get_user(user_id)
        applied = {key: value for key, value in changes.items() if key in _MUTABLE_PROFILE_FIELDS}
        if not applied:
            return user
        for key, value in applied.items():
            setattr(user, key, value)
        user.touch()
        self._session.add(user)
        await self._repository.commit()
        await self._repository.refresh(user)
        logger.info("Profile updated", extra={"user_id": user_id, "fields": sorted(applied)})
        return user


__all__ = ["UserService"]
