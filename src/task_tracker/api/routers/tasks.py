"""Routes handling task CRUD operations."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Query, Response, status

from ...core.cache import cache_get_or_set, task_list_namespace
from ...deps import CurrentIdentityDependency, DatabaseSessionDependency
from ...models import TaskPriority, TaskStatus
from ...presenters import present_task, present_task_page
from ...repositories import SortOrder, TaskFilter, TaskSort, TaskSortField
from ...schemas import TaskListResponse, TaskRead
from ...services import TaskService
from ...services.tasks import MAX_PAGE_SIZE
from ...validation import parse_task_create, parse_task_update

router = APIRouter(prefix="/tasks", tags=["tasks"])

StatusQuery = Annotated[
    TaskStatus | None,
    Query(description="Filter results to tasks matching the supplied status."),
]
PriorityQuery = Annotated[
    TaskPriority | None,
    Query(description="Filter results to tasks matching the supplied priority."),
]
CategoryQuery = Annotated[
    str | None,
    Query(max_length=64, description="Filter results to tasks in the given category."),
]
SearchQuery = Annotated[
    str | None,
    Query(max_length=100, description="Case-insensitive text matched against title or description."),
]
PageQuery = Annotated[int, Query(ge=1, description="1-based page number.")]
PageSizeQuery = Annotated[
    int,
    Query(ge=1, le=MAX_PAGE_SIZE, description="Number of tasks per page."),
]
SortByQuery = Annotated[TaskSortField, Query(description="Field to order results by.")]
SortOrderQuery = Annotated[SortOrder, Query(description="Ordering direction.")]


def _list_cache_key(filters: TaskFilter, sort: TaskSort, page: int, page_size: int) -> str:
    parts = (
        f"status={filters.status.value if filters.status else 'all'}",
        f"priority={filters.priority.value if filters.priority else 'all'}",
        f"category={filters.category_id or 'all'}",
        f"search={filters.search or ''}",
        f"sort={sort.field.value}:{sort.order.value}",
        f"page={page}:size={page_size}",
    )
    return ":".join(parts)


@router.get(
    "",
    response_model=TaskListResponse,
    summary="List tasks with filtering, sorting and pagination",
)
async def list_tasks(
    identity: CurrentIdentityDependency,
    session: DatabaseSessionDependency,
    status: StatusQuery = None,
    priority: PriorityQuery = None,
    category_id: CategoryQuery = None,
    search: SearchQuery = None,
    page: PageQuery = 1,
    page_size: PageSizeQuery = 10,
    sort_by: SortByQuery = TaskSortField.CREATED_AT,
    sort_order: SortOrderQuery = SortOrder.DESC,
) -> TaskListResponse:
    filters = TaskFilter(
        status=status,
        priority=priority,
        category_id=category_id or None,
        search=search.strip() if search and search.strip() else None,
    )
    sort = TaskSort(field=sort_by, order=sort_order)

    async def _build_response() -> TaskListResponse:
        result = await TaskService(session).list_tasks(
            identity.user_id,
            filters=filters,
            sort=sort,
            page=page,
            page_size=page_size,
        )
        return present_task_page(result.items, total=result.total, page=result.page, page_size=result.page_size)

    return await cache_get_or_set(
        namespace=task_list_namespace(identity.user_id),
        key=_list_cache_key(filters, sort, page, page_size),
        builder=_build_response,
        model=TaskListResponse,
    )


@router.post(
    "",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task",
)
async def create_task(
    payload: Annotated[dict[str, Any], Body()],
    identity: CurrentIdentityDependency,
    session: DatabaseSessionDependency,
) -> TaskRead:
    data = parse_task_create(payload)
    task = await TaskService(session).create_task(identity.user_id, **data.model_dump())
    return present_task(task)


@router.get("/{task_id}", response_model=TaskRead, summary="Retrieve a task by id")
async def get_task(
    task_id: str,
    identity: CurrentIdentityDependency,
    session: DatabaseSessionDependency,
) -> TaskRead:
    task = await TaskService(session).get_task(identity.user_id, task_id)
    return present_task(task)


@router.patch("/{task_id}", response_model=TaskRead, summary="Partially update a task")
async def update_task(
    task_id: str,
    payload: Annotated[dict[str, Any], Body()],
    identity: CurrentIdentityDependency,
    session: DatabaseSessionDependency,
) -> TaskRead:
    changes = parse_task_update(payload).changes()
    task = await TaskService(session).update_task(identity.user_id, task_id, changes)
    return present_task(task)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a task",
)
async def delete_task(
    task_id: str,
    identity: CurrentIdentityDependency,
    session: DatabaseSessionDependency,
) -> Response:
    await TaskService(session).delete_task(identity.user_id, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
