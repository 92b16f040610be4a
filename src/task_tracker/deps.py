"""Reusable FastAPI dependencies."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlmodel.ext.asyncio.session import AsyncSession

from .core.config import Settings
from .core.context import bind_user_id
from .core.identity import Identity, resolve_identity
from .db import Database
from .errors import UnauthenticatedError

_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login", auto_error=False)


def get_app_settings(request: Request) -> Settings:
    """Return the settings the running application was built with."""

    return request.app.state.settings


async def get_db_session(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency that yields a database session."""

    database: Database = request.app.state.database
    async for session in database.session():
        yield session


SettingsDependency = Annotated[Settings, Depends(get_app_settings)]


async def get_current_identity(
    token: Annotated[str | None, Depends(_oauth2_scheme)],
    settings: SettingsDependency,
) -> Identity:
    """Resolve the caller or fail with ``UnauthenticatedError``."""

    identity = resolve_identity(token, settings)
    if identity is None:
        raise UnauthenticatedError()
    bind_user_id(identity.user_id)
    return identity


DatabaseSessionDependency = Annotated[AsyncSession, Depends(get_db_session)]
CurrentIdentityDependency = Annotated[Identity, Depends(get_current_identity)]


__all__ = [
    "CurrentIdentityDependency",
    "DatabaseSessionDependency",
    "SettingsDependency",
    "get_app_settings",
    "get_current_identity",
    "get_db_session",
]
