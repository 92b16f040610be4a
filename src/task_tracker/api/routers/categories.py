"""Routes handling category CRUD operations."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Response, status

from ...deps import CurrentIdentityDependency, DatabaseSessionDependency
from ...presenters import present_category
from ...schemas import CategoryRead
from ...services import CategoryService
from ...validation import parse_category

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryRead], summary="List categories ordered by name")
async def list_categories(
    identity: CurrentIdentityDependency,
    session: DatabaseSessionDependency,
) -> list[CategoryRead]:
    categories = await CategoryService(session).list_categories(identity.user_id)
    return [present_category(category) for category in categories]


@router.post(
    "",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
)
async def create_category(
    payload: Annotated[dict[str, Any], Body()],
    identity: CurrentIdentityDependency,
    session: DatabaseSessionDependency,
) -> CategoryRead:
    data = parse_category(payload)
    category = await CategoryService(session).create_category(identity.user_id, data.name)
    return present_category(category)


@router.get("/{category_id}", response_model=CategoryRead, summary="Retrieve a category by id")
async def get_category(
    category_id: str,
    identity: CurrentIdentityDependency,
    session: DatabaseSessionDependency,
) -> CategoryRead:
    category = await CategoryService(session).get_category(identity.user_id, category_id)
    return present_category(category)


@router.patch("/{category_id}", response_model=CategoryRead, summary="Rename a category")
async def rename_category(
    category_id: str,
    payload: Annotated[dict[str, Any], Body()],
    identity: CurrentIdentityDependency,
    session: DatabaseSessionDependency,
) -> CategoryRead:
    data = parse_category(payload)
    category = await CategoryService(session).rename_category(identity.user_id, category_id, data.name)
    return present_category(category)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete an unused category",
)
async def delete_category(
    category_id: str,
    identity: CurrentIdentityDependency,
    session: DatabaseSessionDependency,
) -> Response:
    await CategoryService(session).delete_category(identity.user_id, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
