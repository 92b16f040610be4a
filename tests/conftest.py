from __future__ import annotations

import os

os.environ.setdefault("TASK_TRACKER_ENVIRONMENT", "test")
os.environ.setdefault("TASK_TRACKER_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("TASK_TRACKER_JWT_SECRET_KEY", "test-secret-key")

from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass
from itertools import count

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from task_tracker.core.config import get_settings
from task_tracker.db import Database
from task_tracker.main import create_app
from task_tracker.models import User
from task_tracker.services import RegistrationService

DEFAULT_PASSWORD = "StrongPass123!"


@dataclass(slots=True)
class AuthenticatedUser:
    user_id: str
    email: str
    password: str
    access_token: str

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}


@pytest.fixture()
async def database() -> AsyncIterator[Database]:
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.create_all()
    try:
        yield db
    finally:
        await db.dispose()


@pytest.fixture()
async def session(database: Database) -> AsyncIterator[AsyncSession]:
    async with database.session_factory() as db_session:
        yield db_session


@pytest.fixture()
def app(database: Database) -> FastAPI:
    get_settings.cache_clear()
    return create_app(database=database)


@pytest.fixture()
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client


@pytest.fixture()
def make_user(session: AsyncSession) -> Callable[..., Awaitable[User]]:
    """Register users directly through the service layer."""

    counter = count()
    service = RegistrationService(session)

    async def _factory(*, name: str | None = None, email: str | None = None) -> User:
        index = next(counter)
        return await service.register(
            name=name or f"User {index}",
            email=email or f"user-{index}@example.com",
            password=DEFAULT_PASSWORD,
        )

    return _factory


@pytest.fixture()
def authenticated_user(client: AsyncClient) -> Callable[..., Awaitable[AuthenticatedUser]]:
    """Register and log in users over HTTP."""

    counter = count()

    async def _factory(*, email: str | None = None, password: str = DEFAULT_PASSWORD) -> AuthenticatedUser:
        actual_email = email or f"api-user-{next(counter)}@example.com"
        response = await client.post(
            "/api/auth/register",
            json={"name": "Api User", "email": actual_email, "password": password},
        )
        assert response.status_code == 201, response.text
        user_id = response.json()["id"]

        response = await client.post(
            "/api/auth/login",
            data={"username": actual_email, "password": password},
        )
        assert response.status_code == 200, response.text
        return AuthenticatedUser(
            user_id=user_id,
            email=actual_email,
            password=password,
            access_token=response.json()["access_token"],
        )

    return _factory
