"""Application-level errors and the handlers that render them."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, Mapping

from fastapi import FastAPI, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from .core.context import REQUEST_ID_HEADER, request_scope
from .schemas.system import ErrorResponse

logger = logging.getLogger(__name__)

FieldErrors = dict[str, list[str]]


class ApplicationError(Exception):
    """Base class for domain-specific errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "application_error",
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        self.headers = headers


class UnauthenticatedError(ApplicationError):
    """No identity could be resolved for an operation that requires one."""

    def __init__(self, message: str = "Authentication required.") -> None:
        super().__init__(
            message,
            code="unauthenticated",
            status_code=status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ValidationFailedError(ApplicationError):
    """Input violated shape or range constraints.

    ``fields`` maps every offending field to the reasons it was rejected.
    """

    def __init__(self, fields: FieldErrors, message: str = "Validation failed.") -> None:
        super().__init__(
            message,
            code="validation_failed",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details={"fields": fields},
        )
        self.fields = fields


class NotFoundError(ApplicationError):
    """The referenced entity is absent or not owned by the caller."""

    def __init__(self, message: str = "Resource not found.", *, code: str = "not_found") -> None:
        super().__init__(message, code=code, status_code=status.HTTP_404_NOT_FOUND)


class TaskNotFoundError(NotFoundError):
    def __init__(self) -> None:
        super().__init__("Task not found.", code="task_not_found")


class CategoryNotFoundError(NotFoundError):
    def __init__(self) -> None:
        super().__init__("Category not found.", code="category_not_found")


class InvalidCategoryError(NotFoundError):
    """A task referenced a category the caller does not own."""

    def __init__(self) -> None:
        super().__init__("Category does not exist.", code="invalid_category")


class DuplicateNameError(ApplicationError):
    """A uniquely named entity already exists."""

    def __init__(self, message: str, *, code: str = "duplicate_name") -> None:
        super().__init__(message, code=code, status_code=status.HTTP_409_CONFLICT)


class DuplicateCategoryNameError(DuplicateNameError):
    def __init__(self) -> None:
        super().__init__("Category with this name already exists.", code="duplicate_category_name")


class DuplicateEmailError(DuplicateNameError):
    def __init__(self) -> None:
        super().__init__("Email already registered.", code="duplicate_email")


class CategoryInUseError(ApplicationError):
    """A category cannot be deleted while tasks still reference it."""

    def __init__(self, task_count: int) -> None:
        super().__init__(
            f"This category is used by {task_count} task(s). "
            "Reassign or delete these tasks first.",
            code="category_in_use",
            status_code=status.HTTP_409_CONFLICT,
            details={"task_count": task_count},
        )
        self.task_count = task_count


class PersistenceFailureError(ApplicationError):
    """The storage backend failed or was unreachable."""

    def __init__(self, message: str = "Storage is currently unavailable.") -> None:
        super().__init__(
            message,
            code="persistence_failure",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )


_HTTP_STATUS_CODE_MAP: dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_401_UNAUTHORIZED: "unauthenticated",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    status.HTTP_409_CONFLICT: "conflict",
}


def request_field_errors(errors: Any) -> FieldErrors:
    """Group pydantic-style error entries by the field they refer to.

    Location prefixes such as ``body`` or ``query`` are dropped so request and
    payload validation failures share a single shape.
    """

    fields: FieldErrors = {}
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part not in {"body", "query", "path"}]
        field = ".".join(location) or "__root__"
        fields.setdefault(field, []).append(str(error.get("msg", "Invalid value.")))
    return fields


def _details_with_request_id(request: Request, details: Mapping[str, Any] | None) -> dict[str, Any] | None:
    merged = dict(details or {})
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        merged["request_id"] = request_id
    return merged or None


def _error_response(
    request: Request,
    *,
    status_code: int,
    code: str,
    message: str,
    details: Mapping[str, Any] | None = None,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    payload = ErrorResponse(
        code=code,
        message=message,
        details=_details_with_request_id(request, details),
    )
    response = JSONResponse(status_code=status_code, content=payload.model_dump())
    if headers:
        response.headers.update(headers)
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        response.headers.setdefault(REQUEST_ID_HEADER, request_id)
    return response


def _http_exception_message(status_code: int, detail: Any) -> str:
    if isinstance(detail, str):
        return detail
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def register_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers with the provided FastAPI app."""

    @app.exception_handler(ApplicationError)
    async def _handle_application_error(
        request: Request,
        exc: ApplicationError,
    ) -> JSONResponse:
        with request_scope(getattr(request.state, "request_id", None)):
            log = logger.error if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR else logger.warning
            log(
                "Application error encountered",
                extra={"code": exc.code, "status_code": exc.status_code},
            )
            return _error_response(
                request,
                status_code=exc.status_code,
                code=exc.code,
                message=exc.message,
                details=exc.details,
                headers=exc.headers,
            )

    @app.exception_handler(RequestValidationError)
    async def _handle_request_validation_error(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        with request_scope(getattr(request.state, "request_id", None)):
            fields = request_field_errors(exc.errors())
            logger.warning("Request validation failed", extra={"fields": fields})
            return _error_response(
                request,
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                code="validation_failed",
                message="Validation failed.",
                details={"fields": fields},
            )

    @app.exception_handler(IntegrityError)
    async def _handle_integrity_error(
        request: Request,
        exc: IntegrityError,
    ) -> JSONResponse:
        with request_scope(getattr(request.state, "request_id", None)):
            logger.error("Database integrity error encountered.", exc_info=exc)
            return _error_response(
                request,
                status_code=status.HTTP_409_CONFLICT,
                code="db_integrity_error",
                message="Database integrity violation.",
            )

    @app.exception_handler(StarletteHTTPException)
    async def _handle_http_exception(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        with request_scope(getattr(request.state, "request_id", None)):
            code = _HTTP_STATUS_CODE_MAP.get(exc.status_code, "http_error")
            log = logger.error if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR else logger.warning
            log(
                "HTTP exception raised",
                extra={"code": code, "status_code": exc.status_code, "path": str(request.url.path)},
            )
            return _error_response(
                request,
                status_code=exc.status_code,
                code=code,
                message=_http_exception_message(exc.status_code, exc.detail),
                headers=exc.headers or None,
            )

    @app.exception_handler(Exception)
    async def _handle_unhandled_exception(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        with request_scope(getattr(request.state, "request_id", None)):
            logger.exception("Unhandled application error.")
            return _error_response(
                request,
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                code="server_error",
                message="Internal server error.",
            )


__all__ = [
    "ApplicationError",
    "CategoryInUseError",
    "CategoryNotFoundError",
    "DuplicateCategoryNameError",
    "DuplicateEmailError",
    "DuplicateNameError",
    "FieldErrors",
    "InvalidCategoryError",
    "NotFoundError",
    "PersistenceFailureError",
    "TaskNotFoundError",
    "UnauthenticatedError",
    "ValidationFailedError",
    "register_exception_handlers",
    "request_field_errors",
]
