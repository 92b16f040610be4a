"""Metadata registry used by Alembic and ``Database.create_all``."""

from __future__ import annotations

from sqlmodel import SQLModel

from .. import models  # noqa: F401  # register tables on the metadata

metadata = SQLModel.metadata

__all__ = ["metadata"]
