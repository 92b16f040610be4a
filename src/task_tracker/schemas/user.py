"""User-facing Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints, field_validator

from ..models import UserRole

UserName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=50)]


class UserPublic(BaseModel):
    """Public representation of a user; never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: EmailStr
    role: UserRole
    image: str | None = None
    created_at: datetime


class ProfileUpdate(BaseModel):
    """Partial update of the caller's mutable profile fields."""

    model_config = ConfigDict(
        json_schema_extra={"example": {"name": "Alice Example", "image": None}},
    )

    name: UserName | None = None
    image: str | None = Field(default=None, max_length=2048)

    @field_validator("name", mode="before")
    @classmethod
    def _reject_null_name(cls, value: object) -> object:
        if value is None:
            raise ValueError("Name cannot be null.")
        return value

    def changes(self) -> dict[str, object]:
        """Return only the fields present in the payload."""
        return self.model_dump(exclude_unset=True)


__all__ = ["ProfileUpdate", "UserName", "UserPublic"]
