"""Authentication service: credential checks and access token issuance."""

from __future__ import annotations

from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.config import Settings
from ..core.security import GeneratedToken, create_access_token, verify_password
from ..models import User
from ..repositories import UserRepository


class AuthService:
    """Verify credentials and mint tokens carrying the identity claims."""

    def __init__(self, session: AsyncSession, settings: Settings) -> None:
        self._session = session
        self._settings = settings
        self._user_repository = UserRepository(session)

    async def authenticate(self, email: str, password: str) -> User | None:
        user = await self._user_repository.get_by_email(email)
        if user is None:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    def issue_access_token(self, user: User) -> GeneratedToken:
        return create_access_token(
            subject=user.id,
            claims={"email": user.email, "name": user.name, "role": user.role.value},
            settings=self._settings,
        )


__all__ = ["AuthService"]
