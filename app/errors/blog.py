"""
Blog workflow error classes.

Client-input failures surface as 400 with a ``details`` object naming the
offending field; missing documents surface as 404.
"""

from logging import getLogger
from typing import Any

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
)

from app.errors.base import BaseAppError, create_exception_handler
from app.utils.helpers import file_logger

logger = file_logger(getLogger(__name__))


class BlogInputError(BaseAppError):
    """Base exception for rejected blog input."""

    def __init__(
        self,
        detail: str = "Invalid blog input",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail=detail, status_code=HTTP_400_BAD_REQUEST)
        self.details = details or {}

    def to_content(self) -> dict[str, Any]:
        return {"detail": self.detail, "details": self.details}


class MissingFieldError(BlogInputError):
    """Exception raised when required fields are absent."""

    def __init__(self, fields: list[str]) -> None:
        super().__init__(
            detail=f"Missing required fields: {', '.join(fields)}",
            details={"missing": list(fields)},
        )
        self.fields = list(fields)


class InvalidFormatError(BlogInputError):
    """Exception raised when a structured field cannot be parsed or is malformed."""

    def __init__(self, field: str, reason: str = "could not be parsed") -> None:
        super().__init__(
            detail=f"Invalid format for '{field}': {reason}",
            details={"field": field, "reason": reason},
        )
        self.field = field


class InvalidReferenceError(BlogInputError):
    """Exception raised when a referenced record does not exist."""

    def __init__(self, field: str, value: str) -> None:
        super().__init__(
            detail=f"Invalid {field}: '{value}' does not exist",
            details={"field": field, "value": value},
        )
        self.field = field


class MissingSectionAssetError(BlogInputError):
    """Exception raised when a section has neither a new upload nor a stored image."""

    def __init__(self, index: int) -> None:
        super().__init__(
            detail=f"Section {index} has no image",
            details={"field": "section_images", "section": index},
        )
        self.index = index


class NotFoundError(BaseAppError):
    """Exception raised when a blog or category cannot be resolved."""

    def __init__(self, resource: str = "Blog post", key: str | None = None) -> None:
        super().__init__(detail=f"{resource} not found", status_code=HTTP_404_NOT_FOUND)
        self.resource = resource
        self.key = key

    def to_content(self) -> dict[str, Any]:
        return {"detail": self.detail}


class ForbiddenError(BaseAppError):
    """Exception raised when a principal may not change another author's post."""

    def __init__(self, detail: str = "You can only modify your own blog posts") -> None:
        super().__init__(detail=detail, status_code=HTTP_403_FORBIDDEN)


blog_exception_handler = create_exception_handler(logger)
