"""Payloads served outside the task and category resources."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class RootResponse(BaseModel):
    name: str = Field(description="Configured project name")
    environment: str = Field(description="Active settings profile")
    version: str = Field(description="Package version")
    api_prefix: str = Field(description="Path prefix of the task, category and auth routes")


class HealthCheckResponse(BaseModel):
    status: str = Field(default="ok")
    database: str = Field(default="ok", description="Result of a trivial query against the task store")


class ErrorResponse(BaseModel):
    """Body of every non-2xx response.

    ``details`` always carries ``request_id``; validation failures add
    ``fields`` (field name to messages) and ``category_in_use`` adds
    ``task_count``.
    """

    code: str
    message: str
    details: dict[str, Any] | None = None
