"""Turn untrusted payload mappings into validated schema instances.

Every parser raises :class:`~task_tracker.errors.ValidationFailedError` naming
each offending field with the reasons it was rejected.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import ValidationFailedError, request_field_errors
from .schemas.auth import RegistrationRequest
from .schemas.category import CategoryWrite
from .schemas.task import TaskCreate, TaskUpdate
from .schemas.user import ProfileUpdate

SchemaType = TypeVar("SchemaType", bound=BaseModel)


def _parse(schema: type[SchemaType], payload: Any) -> SchemaType:
    if not isinstance(payload, Mapping):
        raise ValidationFailedError({"__root__": ["Payload must be a JSON object."]})
    try:
        return schema.model_validate(dict(payload))
    except ValidationError as exc:
        raise ValidationFailedError(request_field_errors(exc.errors())) from exc


def parse_task_create(payload: Any) -> TaskCreate:
    return _parse(TaskCreate, payload)


def parse_task_update(payload: Any) -> TaskUpdate:
    """Validate a partial task update; only keys present in ``payload`` are checked."""
    return _parse(TaskUpdate, payload)


def parse_category(payload: Any) -> CategoryWrite:
    return _parse(CategoryWrite, payload)


def parse_registration(payload: Any) -> RegistrationRequest:
    return _parse(RegistrationRequest, payload)


def parse_profile_update(payload: Any) -> ProfileUpdate:
    return _parse(ProfileUpdate, payload)


__all__ = [
    "parse_category",
    "parse_profile_update",
    "parse_registration",
    "parse_task_create",
    "parse_task_update",
]
