from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from fakeredis.aioredis import FakeRedis
from sqlmodel.ext.asyncio.session import AsyncSession

from task_tracker.api.routers.tasks import list_tasks
from task_tracker.core.cache import cache_metrics, close_cache_client, configure_cache, set_cache_client
from task_tracker.core.config import get_settings
from task_tracker.core.identity import Identity
from task_tracker.models import TaskStatus, User
from task_tracker.services import CategoryService, TaskService

pytestmark = pytest.mark.asyncio


@pytest.fixture(autouse=True)
async def configure_test_cache() -> AsyncIterator[None]:
    fake = FakeRedis(decode_responses=True)
    set_cache_client(fake)
    configure_cache(get_settings().model_copy(update={"cache_enabled": True}))
    cache_metrics.reset()
    try:
        yield
    finally:
        configure_cache(None)
        await close_cache_client()
        cache_metrics.reset()


def _identity(user: User) -> Identity:
    return Identity(user_id=user.id, email=user.email, name=user.name, role=user.role)


async def test_task_list_cache_hit_miss_and_invalidation(session: AsyncSession, make_user) -> None:
    user = await make_user()
    identity = _identity(user)
    service = TaskService(session)
    await service.create_task(user.id, title="Task 1")
    await service.create_task(user.id, title="Task 2")

    cache_metrics.reset()

    first = await list_tasks(identity=identity, session=session)
    assert first.total == 2
    metrics = cache_metrics.snapshot()
    assert metrics["misses"] == 1
    assert metrics["hits"] == 0
    assert metrics["skipped"] == 0

    second = await list_tasks(identity=identity, session=session)
    metrics = cache_metrics.snapshot()
    assert metrics["hits"] == 1
    assert metrics["misses"] == 1
    assert second.total == first.total

    await service.create_task(user.id, title="Task 3")

    third = await list_tasks(identity=identity, session=session)
    metrics = cache_metrics.snapshot()
    assert metrics["misses"] == 2
    assert metrics["hits"] == 1
    assert metrics["invalidations"] >= 1
    assert third.total == 3


async def test_cache_keys_cover_filters_and_pages(session: AsyncSession, make_user) -> None:
    user = await make_user()
    identity = _identity(user)
    service = TaskService(session)
    await service.create_task(user.id, title="Open task")
    await service.create_task(user.id, title="Done task", status=TaskStatus.COMPLETED)

    cache_metrics.reset()

    everything = await list_tasks(identity=identity, session=session)
    completed = await list_tasks(identity=identity, session=session, status=TaskStatus.COMPLETED)
    second_page = await list_tasks(identity=identity, session=session, page=2, page_size=1)

    assert everything.total == 2
    assert [item.title for item in completed.items] == ["Done task"]
    assert len(second_page.items) == 1
    assert cache_metrics.snapshot()["misses"] == 3
    assert cache_metrics.snapshot()["hits"] == 0


async def test_cache_is_partitioned_per_user(session: AsyncSession, make_user) -> None:
    alice = await make_user()
    bob = await make_user()
    await TaskService(session).create_task(alice.id, title="Alice task")

    cache_metrics.reset()

    alice_view = await list_tasks(identity=_identity(alice), session=session)
    bob_view = await list_tasks(identity=_identity(bob), session=session)

    assert alice_view.total == 1
    assert bob_view.total == 0
    assert cache_metrics.snapshot()["hits"] == 0


async def test_category_rename_invalidates_cached_listing(session: AsyncSession, make_user) -> None:
    user = await make_user()
    identity = _identity(user)
    categories = CategoryService(session)
    category = await categories.create_category(user.id, "Work")
    await TaskService(session).create_task(user.id, title="Report", category_id=category.id)

    before = await list_tasks(identity=identity, session=session)
    assert before.items[0].category is not None
    assert before.items[0].category.name == "Work"

    await categories.rename_category(user.id, category.id, "Office")

    after = await list_tasks(identity=identity, session=session)
    assert after.items[0].category is not None
    assert after.items[0].category.name == "Office"


async def test_cache_skipped_when_disabled(session: AsyncSession, make_user) -> None:
    user = await make_user()
    configure_cache(get_settings().model_copy(update={"cache_enabled": False}))
    cache_metrics.reset()

    await list_tasks(identity=_identity(user), session=session)

    assert cache_metrics.snapshot()["skipped"] == 1
    assert cache_metrics.snapshot()["misses"] == 0
