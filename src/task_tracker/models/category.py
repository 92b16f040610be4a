"""Category domain model built with SQLModel."""

from __future__ import annotations

import sqlalchemy as sa
from sqlmodel import Field

from .common import ID_LENGTH, TimestampMixin, id_column, new_id

CATEGORY_NAME_MIN_LENGTH = 2
CATEGORY_NAME_MAX_LENGTH = 30


class Category(TimestampMixin, table=True):
    """A user-owned grouping for tasks."""

    __tablename__ = "categories"
    __table_args__ = (
        sa.UniqueConstraint("name", "user_id", name="uq_categories_name_user_id"),
        sa.Index("ix_categories_user_id", "user_id"),
    )

    id: str = Field(default_factory=new_id, sa_column=id_column())
    name: str = Field(
        max_length=CATEGORY_NAME_MAX_LENGTH,
        sa_column=sa.Column(sa.String(length=CATEGORY_NAME_MAX_LENGTH), nullable=False),
    )
    user_id: str = Field(
        sa_column=sa.Column(
            sa.String(length=ID_LENGTH),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
    )


__all__ = ["CATEGORY_NAME_MAX_LENGTH", "CATEGORY_NAME_MIN_LENGTH", "Category"]
