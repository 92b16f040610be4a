"""Per-request values that log records pick up."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

REQUEST_ID_HEADER = "X-Request-ID"

_request_id: ContextVar[str] = ContextVar("task_tracker_request_id", default="-")
_user_id: ContextVar[str | None] = ContextVar("task_tracker_user_id", default=None)


def get_request_id() -> str:
    return _request_id.get()


def get_user_id() -> str | None:
    return _user_id.get()


def bind_user_id(user_id: str) -> None:
    """Record the authenticated caller for the rest of the request."""

    _user_id.set(user_id)


@contextmanager
def request_scope(request_id: str | None) -> Iterator[None]:
    """Bind ``request_id`` until the block exits; ``None`` keeps the current value."""

    if not request_id:
        yield
        return
    token = _request_id.set(request_id)
    try:
        yield
    finally:
        _request_id.reset(token)


__all__ = [
    "REQUEST_ID_HEADER",
    "bind_user_id",
    "get_request_id",
    "get_user_id",
    "request_scope",
]
