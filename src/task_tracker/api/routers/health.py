"""Liveness probe backed by a database round trip."""

from __future__ import annotations

from fastapi import APIRouter, status
from sqlmodel import select

from ...deps import DatabaseSessionDependency
from ...repositories.base import persistence_errors
from ...schemas.system import HealthCheckResponse

router = APIRouter(tags=["system"])


@router.get(
    "/healthz",
    response_model=HealthCheckResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
async def read_health(session: DatabaseSessionDependency) -> HealthCheckResponse:
    """Answer ``ok`` once the database responds; otherwise the 503 envelope."""
    with persistence_errors():
        await session.exec(select(1))
    return HealthCheckResponse(status="ok", database="ok")
