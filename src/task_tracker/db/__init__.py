"""Database related helpers."""

from __future__ import annotations

from .base import metadata
from .session import Database

__all__ = ["Database", "metadata"]
