"""Task-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator

from ..models import TaskPriority, TaskStatus
from ..models.task import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH, TITLE_MIN_LENGTH
from .category import CategoryRef

TaskTitle = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH),
]
TaskDescription = Annotated[
    str,
    StringConstraints(strip_whitespace=True, max_length=DESCRIPTION_MAX_LENGTH),
]

TASK_READ_EXAMPLE = {
    "id": "9b2f6c0e1d4a4f7e8c3b5a6d7e8f9012",
    "title": "Draft product documentation",
    "description": "Outline sections for the public API guide.",
    "status": TaskStatus.TODO.value,
    "priority": TaskPriority.MEDIUM.value,
    "due_date": "2024-02-01T00:00:00Z",
    "category": {"id": "4f1c1d3c6a3b4e0f9a0d7f4b2c8e9a11", "name": "Work"},
    "created_at": "2024-01-01T12:00:00Z",
    "updated_at": "2024-01-02T08:30:00Z",
}


def parse_due_date(value: Any) -> Any:
    """Accept ISO-8601 dates or datetimes, normalised to UTC.

    Naive values are taken as UTC.
    """

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            value = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValueError("Due date must be a valid ISO-8601 date.") from exc
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class TaskCreate(BaseModel):
    """Payload for creating a new task."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Draft product documentation",
                "description": "Outline sections for the public API guide.",
                "priority": TaskPriority.HIGH.value,
                "due_date": "2024-02-01",
            }
        }
    )

    title: TaskTitle
    description: TaskDescription | None = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: datetime | None = None
    category_id: str | None = Field(default=None, max_length=64)

    @field_validator("due_date", mode="before")
    @classmethod
    def _parse_due_date(cls, value: Any) -> Any:
        return parse_due_date(value)

    @field_validator("category_id", mode="before")
    @classmethod
    def _blank_category_is_none(cls, value: Any) -> Any:
        return _blank_to_none(value)


class TaskUpdate(BaseModel):
    """Payload for partially updating an existing task.

    Absent fields are left untouched; an explicit ``null`` clears
    ``description``, ``due_date`` and ``category_id``.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": TaskStatus.IN_PROGRESS.value,
                "category_id": None,
            }
        }
    )

    title: TaskTitle | None = None
    description: TaskDescription | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None
    category_id: str | None = Field(default=None, max_length=64)

    @field_validator("due_date", mode="before")
    @classmethod
    def _parse_due_date(cls, value: Any) -> Any:
        return parse_due_date(value)

    @field_validator("category_id", mode="before")
    @classmethod
    def _blank_category_is_none(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("title", "status", "priority", mode="before")
    @classmethod
    def _reject_null(cls, value: object) -> object:
        if value is None:
            raise ValueError("Field cannot be null.")
        return value

    def changes(self) -> dict[str, Any]:
        """Return only the fields present in the payload."""
        return self.model_dump(exclude_unset=True)


class TaskRead(BaseModel):
    """Public representation of a task."""

    model_config = ConfigDict(json_schema_extra={"example": TASK_READ_EXAMPLE})

    id: str
    title: str
    description: str | None = None
    status: TaskStatus
    priority: TaskPriority
    due_date: datetime | None = None
    category: CategoryRef | None = None
    created_at: datetime
    updated_at: datetime


class TaskListResponse(BaseModel):
    """A single page of tasks plus the totals needed to page through them."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "items": [TASK_READ_EXAMPLE],
                "total": 1,
                "page": 1,
                "page_size": 10,
                "total_pages": 1,
            }
        }
    )

    items: list[TaskRead]
    total: int = Field(ge=0)
    page: int = Field(ge=1)
    page_size: int = Field(ge=1)
    total_pages: int = Field(ge=0)


__all__ = [
    "TaskCreate",
    "TaskListResponse",
    "TaskRead",
    "TaskUpdate",
    "parse_due_date",
]
