"""Field-level validation errors."""

from typing import Any, cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_400_BAD_REQUEST

from blogapi.errors.base import BaseAppError
from blogapi.monitoring import get_logger
from blogapi.utils.helpers import host

logger = get_logger(__name__)

SKIPPED_LOCATIONS = frozenset({"body", "query", "path", "form", "header", "cookie"})


class ValidationError(BaseAppError):
    """Validation failure detected after request parsing, reported per field."""

    def __init__(
        self,
        detail: str = "Validation failed",
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(detail=detail, status_code=HTTP_400_BAD_REQUEST)
        self.errors = errors or []

    @classmethod
    def for_field(cls, field: str, message: str, error_type: str = "value_error") -> "ValidationError":
        """Build an error carrying a single field message."""
        return cls(errors=[{"field": field, "message": message, "type": error_type}])


def _field_name(loc: tuple[Any, ...] | list[Any]) -> str:
    parts = [str(part) for part in loc]
    if parts and parts[0] in SKIPPED_LOCATIONS:
        parts = parts[1:]
    return ".".join(parts)


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """
    Handle request validation errors with a flat per-field response.

    Args:
        request: The incoming request.
        exc: The RequestValidationError exception.

    Returns:
        ORJSONResponse with formatted validation errors.
    """
    exec_error = cast(RequestValidationError, exc)

    formatted_errors = []
    for error in exec_error.errors():
        formatted_error: dict[str, Any] = {
            "field": _field_name(error.get("loc", ())),
            "message": error.get("msg", "Invalid value"),
            "type": error.get("type", "validation_error"),
        }
        if "ctx" in error:
            formatted_error["context"] = {
                key: str(value) if isinstance(value, Exception) else value
                for key, value in error["ctx"].items()
            }
        formatted_errors.append(formatted_error)

    logger.warning(
        f"Validation error for ip: {host(request)} at endpoint {request.url.path}: {formatted_errors}",
    )

    return ORJSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content={
            "detail": "Validation failed",
            "errors": formatted_errors,
        },
    )


async def field_error_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Render a ValidationError raised by a service."""
    error = cast(ValidationError, exc)
    logger.warning(
        f"Field error for ip: {host(request)} at endpoint {request.url.path}: {error.errors}",
    )
    return ORJSONResponse(
        status_code=error.status_code,
        content={"detail": error.detail, "errors": error.errors},
    )
