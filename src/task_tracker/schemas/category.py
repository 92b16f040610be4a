"""Category-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, StringConstraints

from ..models.category import CATEGORY_NAME_MAX_LENGTH, CATEGORY_NAME_MIN_LENGTH

CategoryName = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True,
        min_length=CATEGORY_NAME_MIN_LENGTH,
        max_length=CATEGORY_NAME_MAX_LENGTH,
    ),
]


class CategoryWrite(BaseModel):
    """Payload for creating or renaming a category."""

    model_config = ConfigDict(json_schema_extra={"example": {"name": "Work"}})

    name: CategoryName


class CategoryRef(BaseModel):
    """Category projection embedded in task responses."""

    id: str
    name: str


class CategoryRead(BaseModel):
    """Public representation of a category."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "4f1c1d3c6a3b4e0f9a0d7f4b2c8e9a11",
                "name": "Work",
                "created_at": "2024-01-01T12:00:00Z",
                "updated_at": "2024-01-02T08:30:00Z",
            }
        }
    )

    id: str
    name: str
    created_at: datetime
    updated_at: datetime


__all__ = ["CategoryName", "CategoryRead", "CategoryRef", "CategoryWrite"]
