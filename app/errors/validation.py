"""Request validation error handling for FastAPI (query and path parameters)."""

from logging import getLogger
from typing import Any, cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_422_UNPROCESSABLE_CONTENT

from app.utils.helpers import file_logger, host

logger = file_logger(getLogger(__name__))


def format_validation_error(error: dict[str, Any]) -> dict[str, Any]:
    """Flatten one pydantic error into ``{location, field, message, type}``."""
    loc = [str(part) for part in error.get("loc", [])]
    formatted: dict[str, Any] = {
        "location": loc[0] if loc else "unknown",
        "field": ".".join(loc[1:]),
        "message": error.get("msg", "Invalid value"),
        "type": error.get("type", "validation_error"),
    }
    if "input" in error:
        formatted["input"] = error["input"]
    if ctx := error.get("ctx"):
        formatted["context"] = {
            key: str(value) if isinstance(value, Exception) else value
            for key, value in ctx.items()
        }
    return formatted


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """
    Handle request validation errors (bad page/limit values and the like).

    Args:
        request: The incoming request.
        exc: The RequestValidationError exception.

    Returns:
        ORJSONResponse with formatted validation errors.
    """
    errors = [format_validation_error(e) for e in cast(RequestValidationError, exc).errors()]

    logger.warning(
        f"Validation error for ip: {host(request)} at endpoint {request.url.path}: {errors}",
    )

    return ORJSONResponse(
        status_code=HTTP_422_UNPROCESSABLE_CONTENT,
        content={"detail": "Validation failed", "errors": errors},
    )
