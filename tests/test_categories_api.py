from __future__ import annotations

import pytest
from fastapi import status
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def test_category_crud_flow(client: AsyncClient, authenticated_user) -> None:
    account = await authenticated_user()
    headers = account.headers

    created = await client.post("/api/categories", json={"name": " Work "}, headers=headers)
    assert created.status_code == status.HTTP_201_CREATED, created.text
    category = created.json()
    assert category["name"] == "Work"
    assert set(category) == {"id", "name", "created_at", "updated_at"}

    await client.post("/api/categories", json={"name": "Errands"}, headers=headers)
    listing = await client.get("/api/categories", headers=headers)
    assert [item["name"] for item in listing.json()] == ["Errands", "Work"]

    fetched = await client.get(f"/api/categories/{category['id']}", headers=headers)
    assert fetched.status_code == status.HTTP_200_OK
    assert fetched.json()["id"] == category["id"]

    renamed = await client.patch(
        f"/api/categories/{category['id']}",
        json={"name": "Office"},
        headers=headers,
    )
    assert renamed.status_code == status.HTTP_200_OK
    assert renamed.json()["name"] == "Office"

    deleted = await client.delete(f"/api/categories/{category['id']}", headers=headers)
    assert deleted.status_code == status.HTTP_204_NO_CONTENT
    assert deleted.content == b""

    missing = await client.get(f"/api/categories/{category['id']}", headers=headers)
    assert missing.status_code == status.HTTP_404_NOT_FOUND
    assert missing.json()["code"] == "category_not_found"


async def test_duplicate_category_name_conflicts(client: AsyncClient, authenticated_user) -> None:
    alice = await authenticated_user()
    bob = await authenticated_user()

    first = await client.post("/api/categories", json={"name": "Home"}, headers=alice.headers)
    assert first.status_code == status.HTTP_201_CREATED
    duplicate = await client.post("/api/categories", json={"name": "Home"}, headers=alice.headers)
    assert duplicate.status_code == status.HTTP_409_CONFLICT
    assert duplicate.json()["code"] == "duplicate_category_name"

    other_user = await client.post("/api/categories", json={"name": "Home"}, headers=bob.headers)
    assert other_user.status_code == status.HTTP_201_CREATED


async def test_foreign_category_is_not_found(client: AsyncClient, authenticated_user) -> None:
    alice = await authenticated_user()
    bob = await authenticated_user()
    created = await client.post("/api/categories", json={"name": "Private"}, headers=alice.headers)
    category_id = created.json()["id"]

    for method, kwargs in (
        ("GET", {}),
        ("PATCH", {"json": {"name": "Stolen"}}),
        ("DELETE", {}),
    ):
        response = await client.request(method, f"/api/categories/{category_id}", headers=bob.headers, **kwargs)
        assert response.status_code == status.HTTP_404_NOT_FOUND, method
        assert response.json()["code"] == "category_not_found"

    assert (await client.get("/api/categories", headers=bob.headers)).json() == []


async def test_category_in_use_reports_task_count(client: AsyncClient, authenticated_user) -> None:
    account = await authenticated_user()
    headers = account.headers
    category_id = (await client.post("/api/categories", json={"name": "Errands"}, headers=headers)).json()["id"]
    task = await client.post(
        "/api/tasks",
        json={"title": "Post office", "category_id": category_id},
        headers=headers,
    )
    task_id = task.json()["id"]

    blocked = await client.delete(f"/api/categories/{category_id}", headers=headers)
    assert blocked.status_code == status.HTTP_409_CONFLICT
    payload = blocked.json()
    assert payload["code"] == "category_in_use"
    assert payload["details"]["task_count"] == 1
    assert "1 task(s)" in payload["message"]

    reassigned = await client.patch(f"/api/tasks/{task_id}", json={"category_id": None}, headers=headers)
    assert reassigned.json()["category"] is None

    allowed = await client.delete(f"/api/categories/{category_id}", headers=headers)
    assert allowed.status_code == status.HTTP_204_NO_CONTENT


async def test_invalid_category_name_is_rejected(client: AsyncClient, authenticated_user) -> None:
    account = await authenticated_user()

    response = await client.post("/api/categories", json={"name": "x"}, headers=account.headers)

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert list(response.json()["details"]["fields"]) == ["name"]
