"""Endpoints for the caller's own profile."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body

from ...deps import CurrentIdentityDependency, DatabaseSessionDependency
from ...presenters import present_user
from ...schemas import UserPublic
from ...services import UserService
from ...validation import parse_profile_update

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserPublic, summary="Return the authenticated user")
async def read_current_user(
    identity: CurrentIdentityDependency,
    session: DatabaseSessionDependency,
) -> UserPublic:
    user = await UserService(session).get_user(identity.user_id)
    return present_user(user)


@router.patch("/me", response_model=UserPublic, summary="Update name or avatar")
async def update_current_user(
    payload: Annotated[dict[str, Any], Body()],
    identity: CurrentIdentityDependency,
    session: DatabaseSessionDependency,
) -> UserPublic:
    changes = parse_profile_update(payload).changes()
    user = await UserService(session).update_profile(identity.user_id, changes)
    return present_user(user)
