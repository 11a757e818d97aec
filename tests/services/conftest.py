# tests/services/conftest.py
"""Pytest fixtures for services tests."""

from collections.abc import Callable
from io import BytesIO
from pathlib import Path

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from app.services.assets import AssetUploader


def make_upload(filename: str, data: bytes, content_type: str = "image/jpeg") -> UploadFile:
    """Build an ``UploadFile`` the way Starlette hands it to a route."""
    return UploadFile(
        file=BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.fixture
def upload_factory() -> Callable[..., UploadFile]:
    """Expose the ``UploadFile`` builder to tests."""
    return make_upload


@pytest.fixture
def staging_dir(tmp_path: Path) -> Path:
    """Empty staging directory for one test."""
    path = tmp_path / "staging"
    path.mkdir()
    return path


@pytest.fixture
def uploader(fake_storage: object, staging_dir: Path) -> AssetUploader:
    """Asset uploader bound to the fake storage backend."""
    return AssetUploader(storage=fake_storage, tmp_dir=staging_dir, timeout=1.0)  # type: ignore[arg-type]
