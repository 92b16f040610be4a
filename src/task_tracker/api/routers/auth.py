"""Registration and login endpoints."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, status
from fastapi.security import OAuth2PasswordRequestForm

from ...deps import DatabaseSessionDependency, SettingsDependency
from ...errors import UnauthenticatedError
from ...presenters import present_user
from ...schemas import AccessTokenResponse, UserPublic
from ...services import AuthService, RegistrationService
from ...validation import parse_registration

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=UserPublic,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user account",
)
async def register(
    payload: Annotated[dict[str, Any], Body()],
    session: DatabaseSessionDependency,
) -> UserPublic:
    data = parse_registration(payload)
    user = await RegistrationService(session).register(
        name=data.name,
        email=str(data.email),
        password=data.password,
    )
    return present_user(user)


@router.post(
    "/login",
    response_model=AccessTokenResponse,
    summary="Exchange email and password for an access token",
)
async def login(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    session: DatabaseSessionDependency,
    settings: SettingsDependency,
) -> AccessTokenResponse:
    service = AuthService(session, settings)
    user = await service.authenticate(form_data.username, form_data.password)
    if user is None:
        raise UnauthenticatedError("Incorrect email or password.")
    token = service.issue_access_token(user)
    return AccessTokenResponse(
        access_token=token.token,
        expires_in=settings.access_token_expire_minutes * 60,
        user=present_user(user),
    )
