"""
Upload-related error classes.

This module defines custom exceptions for image upload operations,
including file validation and asset storage errors.
"""

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from app.errors.base import BaseAppError, create_exception_handler
from app.monitoring import get_logger

logger = get_logger(__name__)


class UploadError(BaseAppError):
    """Base exception for upload-related errors."""

    def __init__(
        self,
        detail: str = "Error uploading image",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
        error: str | None = None,
    ) -> None:
        super().__init__(detail=detail, status_code=status_code)
        self.error = error


class ImageTooLargeError(UploadError):
    """Exception raised when uploaded image exceeds size limit."""

    def __init__(
        self,
        max_size_mb: int = 5,
        actual_size_mb: float | None = None,
    ) -> None:
        detail = f"Image is too large. Please use an image smaller than {max_size_mb}MB."
        if actual_size_mb is not None:
            detail += f" Your file is {actual_size_mb:.1f}MB."
        super().__init__(detail=detail, status_code=HTTP_413_REQUEST_ENTITY_TOO_LARGE)
        self.max_size_mb = max_size_mb
        self.actual_size_mb = actual_size_mb


class UnsupportedImageTypeError(UploadError):
    """Exception raised when uploaded image type is not supported."""

    def __init__(
        self,
        content_type: str,
        allowed_types: list[str] | None = None,
    ) -> None:
        allowed = allowed_types or ["image/jpeg", "image/png", "image/webp"]
        detail = f"Unsupported image type '{content_type}'. Allowed: {', '.join(allowed)}"
        super().__init__(detail=detail, status_code=HTTP_415_UNSUPPORTED_MEDIA_TYPE)
        self.content_type = content_type
        self.allowed_types = allowed


class MediaLimitExceededError(UploadError):
    """Exception raised when too many images are attached to one request."""

    def __init__(self, field: str = "section_images", max_count: int = 10) -> None:
        detail = f"Too many files for '{field}': at most {max_count} allowed."
        super().__init__(detail=detail, status_code=HTTP_400_BAD_REQUEST)
        self.field = field
        self.max_count = max_count


upload_exception_handler = create_exception_handler(logger)
