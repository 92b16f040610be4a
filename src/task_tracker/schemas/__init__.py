"""Pydantic schemas for public interfaces."""

from __future__ import annotations

from .auth import AccessTokenResponse, RegistrationRequest, TokenPayload
from .category import CategoryRead, CategoryRef, CategoryWrite
from .system import ErrorResponse, HealthCheckResponse, RootResponse
from .task import TaskCreate, TaskListResponse, TaskRead, TaskUpdate
from .user import ProfileUpdate, UserPublic

__all__ = [
    "AccessTokenResponse",
    "CategoryRead",
    "CategoryRef",
    "CategoryWrite",
    "ErrorResponse",
    "HealthCheckResponse",
    "ProfileUpdate",
    "RegistrationRequest",
    "RootResponse",
    "TaskCreate",
    "TaskListResponse",
    "TaskRead",
    "TaskUpdate",
    "TokenPayload",
    "UserPublic",
]
