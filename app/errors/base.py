from collections.abc import Awaitable, Callable
from logging import Logger, getLogger
from typing import Any

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from app.configs.settings import DEFAULT_ERROR_MESSAGE
from app.utils.helpers import file_logger, host

logger = file_logger(getLogger(__name__))


class BaseAppError(Exception):
    """Base exception class for application errors."""

    def __init__(
        self,
        detail: str = "Internal Server Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code

    def __str__(self) -> str:
        return self.detail

    def to_content(self) -> dict[str, Any]:
        """Build the JSON body: ``detail`` plus any extra attributes."""
        content: dict[str, Any] = {"detail": self.detail}
        content.update(
            {k: v for k, v in self.__dict__.items() if k not in ("status_code", "detail")},
        )
        return content


class InternalError(BaseAppError):
    """Exception raised for unexpected failures; carries the underlying error text."""

    def __init__(self, detail: str = DEFAULT_ERROR_MESSAGE, error: str | None = None) -> None:
        super().__init__(detail=detail, status_code=HTTP_500_INTERNAL_SERVER_ERROR)
        self.error = error


def create_exception_handler(
    logger: Logger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """
    Create a standardized exception handler for the application.

    Args:
        logger: Logger instance to use for logging exceptions.

    Returns:
        A callable exception handler.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        if not isinstance(exc, BaseAppError):
            return await unhandled_exception_handler(request, exc)

        logger.warning(f"{exc.detail} for ip: {host(request)} for endpoint {request.url.path}")
        return ORJSONResponse(content=exc.to_content(), status_code=exc.status_code)

    return handler


async def unhandled_exception_handler(request: Request, exc: Exception) -> ORJSONResponse:
    """Render any unexpected exception as an ``InternalError``."""
    logger.error(f"Unhandled error at endpoint {request.url.path}", exc_info=exc)
    error = InternalError(error=str(exc))
    return ORJSONResponse(content=error.to_content(), status_code=error.status_code)
