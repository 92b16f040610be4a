"""Service layer abstractions for orchestrating domain workflows."""

from __future__ import annotations

from .auth import AuthService
from .categories import CategoryService
from .registration import RegistrationService
from .tasks import TaskPage, TaskService
from .users import UserService

__all__ = [
    "AuthService",
    "CategoryService",
    "RegistrationService",
    "TaskPage",
    "TaskService",
    "UserService",
]
