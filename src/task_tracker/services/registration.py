"""Registration of new users with hashed credentials."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.security import get_password_hash
from ..errors import DuplicateEmailError
from ..models import User, UserRole
from ..repositories import UserRepository

logger = logging.getLogger(__name__)


class RegistrationService:
    """Create user accounts, keeping email addresses unique regardless of case."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._repository = UserRepository(session)

    async def register(self, *, name: str, email: str, password: str) -> User:
        normalized_email = email.strip().lower()
        if await self._repository.get_by_email(normalized_email) is not None:
            logger.info("Registration rejected for existing email")
            raise DuplicateEmailError()

        user = User(
            name=name,
            email=normalized_email,
            hashed_password=get_password_hash(password),
            role=UserRole.USER,
        )
        try:
            await self._repository.add(user)
            await self._repository.commit()
        except IntegrityError as exc:
            await self._repository.rollback()
            raise DuplicateEmailError() from exc
        await self._repository.refresh(user)
        logger.info("User registered", extra={"user_id": user.id})
        return user


__all__ = ["RegistrationService"]
