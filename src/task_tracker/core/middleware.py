"""HTTP middleware."""

from __future__ import annotations

import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from .context import REQUEST_ID_HEADER, request_scope


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Tag every request with an id, echoed back in ``X-Request-ID``.

    A caller-supplied id is reused so traces can span services.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        with request_scope(request_id):
            response = await call_next(request)
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
        return response


__all__ = ["CorrelationIdMiddleware"]
