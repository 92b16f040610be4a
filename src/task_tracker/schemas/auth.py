"""Schemas describing registration and authentication payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints

from ..core.security import TokenType
from ..models import UserRole
from .user import UserName, UserPublic

Password = Annotated[str, StringConstraints(min_length=8, max_length=100)]


class RegistrationRequest(BaseModel):
    """Incoming payload for registering a new user."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Alice Example",
                "email": "alice@example.com",
                "password": "StrongPass123!",
            }
        }
    )

    name: UserName
    email: EmailStr
    password: Password


class AccessTokenResponse(BaseModel):
    """Access token issued after a successful login."""

    access_token: str
    token_type: str = Field(default="bearer", frozen=True)
    expires_in: int
    user: UserPublic


class TokenPayload(BaseModel):
    """Validated JWT payload carrying the caller's identity claims."""

    model_config = ConfigDict(extra="ignore")

    sub: str
    email: str
    name: str
    role: UserRole
    exp: datetime
    iat: datetime
    jti: str
    type: TokenType


__all__ = ["AccessTokenResponse", "Password", "RegistrationRequest", "TokenPayload"]
