# tests/errors/test_upload_errors.py
"""Tests for app/errors/upload.py module."""

from unittest.mock import MagicMock

import orjson
import pytest

from app.errors.upload import (
    ImageTooLargeError,
    MediaLimitExceededError,
    UnsupportedImageTypeError,
    UploadError,
    upload_exception_handler,
)


class TestUploadError:
    """Tests for base UploadError exception."""

    def test_default_values(self) -> None:
        """Test default initialization values."""
        error = UploadError()
        assert error.detail == "Error uploading image"
        assert error.status_code == 500
        assert error.error is None

    def test_body_carries_error_text(self) -> None:
        error = UploadError(error="upload timed out after 30.0s")
        assert error.to_content() == {
            "detail": "Error uploading image",
            "error": "upload timed out after 30.0s",
        }


class TestImageTooLargeError:
    """Tests for ImageTooLargeError exception."""

    def test_default_values(self) -> None:
        """Test default initialization values."""
        error = ImageTooLargeError()
        assert "smaller than 5MB" in error.detail
        assert error.status_code == 413

    def test_actual_size_reported(self) -> None:
        error = ImageTooLargeError(max_size_mb=10, actual_size_mb=12.34)
        assert "10MB" in error.detail
        assert "12.3MB" in error.detail


class TestUnsupportedImageTypeError:
    """Tests for UnsupportedImageTypeError exception."""

    def test_default_values(self) -> None:
        """Test default initialization values."""
        error = UnsupportedImageTypeError(content_type="image/gif")
        assert "Unsupported image type" in error.detail
        assert "image/gif" in error.detail
        assert error.status_code == 415

    def test_custom_allowed_types(self) -> None:
        """Test custom allowed types in message."""
        error = UnsupportedImageTypeError(
            content_type="image/bmp",
            allowed_types=["image/jpeg", "image/png"],
        )
        assert "image/jpeg, image/png" in error.detail


class TestMediaLimitExceededError:
    """Tests for MediaLimitExceededError exception."""

    def test_values(self) -> None:
        error = MediaLimitExceededError(max_count=10)
        assert error.status_code == 400
        assert "at most 10" in error.detail
        assert error.field == "section_images"


@pytest.mark.asyncio
async def test_upload_exception_handler() -> None:
    """Test the handler renders upload errors with their status."""
    request = MagicMock()
    request.client.host = "10.0.0.1"
    request.url.path = "/blogs/"

    response = await upload_exception_handler(request, UploadError(error="remote down"))

    assert response.status_code == 500
    assert orjson.loads(response.body) == {"detail": "Error uploading image", "error": "remote down"}
