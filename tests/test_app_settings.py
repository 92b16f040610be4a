from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from fakeredis.aioredis import FakeRedis
from fastapi import FastAPI, status
from httpx import ASGITransport, AsyncClient

from task_tracker.core.cache import cache_metrics, close_cache_client, configure_cache, set_cache_client
from task_tracker.core.config import Settings, get_settings
from task_tracker.core.security import decode_token
from task_tracker.db import Database
from task_tracker.main import create_app

pytestmark = pytest.mark.asyncio

PASSWORD = "StrongPass123!"


def _custom_settings(**overrides: object) -> Settings:
    values: dict[str, object] = {
        "environment": "test",
        "project_name": "Custom Tracker",
        "api_prefix": "/v1",
        "jwt_secret_key": "custom-secret",
        "database_url": "sqlite+aiosqlite:///:memory:",
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture(autouse=True)
async def reset_cache() -> AsyncIterator[None]:
    try:
        yield
    finally:
        configure_cache(None)
        await close_cache_client()
        cache_metrics.reset()


async def _login(client: AsyncClient, prefix: str, email: str) -> str:
    registered = await client.post(
        f"{prefix}/auth/register",
        json={"name": "Custom User", "email": email, "password": PASSWORD},
    )
    assert registered.status_code == status.HTTP_201_CREATED, registered.text
    response = await client.post(f"{prefix}/auth/login", data={"username": email, "password": PASSWORD})
    assert response.status_code == status.HTTP_200_OK, response.text
    return response.json()["access_token"]


def _client(app: FastAPI) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")


async def test_root_metadata_reflects_supplied_settings(database: Database) -> None:
    app = create_app(_custom_settings(), database=database)

    async with _client(app) as client:
        response = await client.get("/")

    assert response.json()["api_prefix"] == "/v1"
    assert response.json()["name"] == "Custom Tracker"


async def test_tokens_use_the_application_secret(database: Database) -> None:
    settings = _custom_settings()
    app = create_app(settings, database=database)

    async with _client(app) as client:
        token = await _login(client, "/v1", "custom@example.com")
        me = await client.get("/v1/users/me", headers={"Authorization": f"Bearer {token}"})

    assert me.status_code == status.HTTP_200_OK
    claims = decode_token(token=token, secret="custom-secret", algorithm=settings.jwt_algorithm)
    assert claims["email"] == "custom@example.com"
    assert get_settings().jwt_secret_key != "custom-secret"


async def test_tokens_from_another_secret_are_rejected(database: Database) -> None:
    default_app = create_app(_custom_settings(jwt_secret_key="other-secret"), database=database)
    async with _client(default_app) as client:
        foreign_token = await _login(client, "/v1", "foreign@example.com")

    app = create_app(_custom_settings(), database=database)
    async with _client(app) as client:
        response = await client.get("/v1/users/me", headers={"Authorization": f"Bearer {foreign_token}"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


async def test_cache_toggle_follows_application_settings(database: Database) -> None:
    set_cache_client(FakeRedis(decode_responses=True))
    app = create_app(_custom_settings(cache_enabled=True), database=database)

    async with _client(app) as client:
        token = await _login(client, "/v1", "cached@example.com")
        headers = {"Authorization": f"Bearer {token}"}
        cache_metrics.reset()
        await client.get("/v1/tasks", headers=headers)
        await client.get("/v1/tasks", headers=headers)

    assert get_settings().cache_enabled is False
    assert cache_metrics.snapshot()["misses"] == 1
    assert cache_metrics.snapshot()["hits"] == 1
