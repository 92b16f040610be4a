"""User domain models built with SQLModel."""

from __future__ import annotations

from enum import Enum

import sqlalchemy as sa
from sqlmodel import Field

from .common import TimestampMixin, id_column, new_id


class UserRole(str, Enum):
    """Roles supported by the authentication system."""

    USER = "USER"
    ADMIN = "ADMIN"


class User(TimestampMixin, table=True):
    """Persistent user model.

    ``email`` is stored lower-cased so that the unique constraint is
    case-insensitive.
    """

    __tablename__ = "users"

    id: str = Field(default_factory=new_id, sa_column=id_column())
    name: str = Field(
        max_length=50,
        sa_column=sa.Column(sa.String(length=50), nullable=False),
    )
    email: str = Field(
        max_length=320,
        sa_column=sa.Column(sa.String(length=320), nullable=False, unique=True, index=True),
    )
    hashed_password: str = Field(
        max_length=255,
        sa_column=sa.Column(sa.String(length=255), nullable=False),
    )
    role: UserRole = Field(
        default=UserRole.USER,
        sa_column=sa.Column(
            sa.Enum(UserRole, name="user_role", native_enum=False),
            nullable=False,
            server_default=UserRole.USER.value,
        ),
    )
    image: str | None = Field(
        default=None,
        sa_column=sa.Column(sa.String(length=2048), nullable=True),
    )


__all__ = ["User", "UserRole"]
