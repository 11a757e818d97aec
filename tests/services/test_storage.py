# tests/services/test_storage.py
"""Tests for storage services."""

import re
from collections.abc import Callable
from pathlib import Path

import pytest
from PIL import Image

from app.schemas.asset import CropBox, Transformation
from app.services.storage import get_storage_service
from app.services.storage.base import asset_id_from_url
from app.services.storage.local import LocalStorage, apply_transformations


@pytest.fixture
def local_storage(tmp_path: Path) -> LocalStorage:
    """Create a LocalStorage instance with temp directory."""
    return LocalStorage(uploads_dir=tmp_path / "uploads", base_url="http://cdn.test/")


@pytest.fixture
def staged_jpeg(tmp_path: Path, image_factory: Callable[..., bytes]) -> Path:
    """A staged 64x48 JPEG."""
    path = tmp_path / "staged.jpg"
    path.write_bytes(image_factory("JPEG", (64, 48)))
    return path


class TestAssetIdFromUrl:
    """Tests for deriving asset identifiers from URLs."""

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            (
                "https://res.cloudinary.com/demo/image/upload/v1/blogs/main_image-1-ab12cd34.jpg",
                "main_image-1-ab12cd34",
            ),
            ("http://cdn.test/uploads/blogs/section_image-9-ffffffff.png?x=1", "section_image-9-ffffffff"),
            ("/uploads/blogs/plain", "plain"),
            ("", ""),
        ],
    )
    def test_asset_id(self, url: str, expected: str) -> None:
        assert asset_id_from_url(url) == expected


class TestLocalStorage:
    """Tests for LocalStorage service."""

    @pytest.mark.asyncio
    async def test_upload_copies_and_names_file(
        self,
        local_storage: LocalStorage,
        staged_jpeg: Path,
    ) -> None:
        url = await local_storage.upload(staged_jpeg, "main_image")

        assert url.startswith("http://cdn.test/uploads/blogs/")
        name = url.rsplit("/", 1)[1]
        assert re.fullmatch(r"main_image-\d{13}-[0-9a-f]{8}\.jpg", name)
        stored = local_storage.base_path / name
        assert stored.read_bytes() == staged_jpeg.read_bytes()
        # The staged source is left for the caller to remove
        assert staged_jpeg.exists()

    @pytest.mark.asyncio
    async def test_each_upload_gets_unique_name(
        self,
        local_storage: LocalStorage,
        staged_jpeg: Path,
    ) -> None:
        first = await local_storage.upload(staged_jpeg, "section_image")
        second = await local_storage.upload(staged_jpeg, "section_image")

        assert first != second

    @pytest.mark.asyncio
    async def test_upload_applies_crop(
        self,
        local_storage: LocalStorage,
        staged_jpeg: Path,
    ) -> None:
        edits = [
            Transformation(effect="crop", box=CropBox(x=4, y=4, width=20, height=10)),
            Transformation(effect="brightness", amount=25),
        ]

        url = await local_storage.upload(staged_jpeg, "main_image", edits)

        with Image.open(local_storage.base_path / url.rsplit("/", 1)[1]) as img:
            assert img.size == (20, 10)
            assert img.format == "JPEG"

    @pytest.mark.asyncio
    async def test_delete_removes_file(
        self,
        local_storage: LocalStorage,
        staged_jpeg: Path,
    ) -> None:
        url = await local_storage.upload(staged_jpeg, "main_image")

        assert await local_storage.delete(url) is True
        assert list(local_storage.base_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_delete_missing_file(self, local_storage: LocalStorage) -> None:
        assert await local_storage.delete("http://cdn.test/uploads/blogs/gone-1-aaaaaaaa.jpg") is False
        assert await local_storage.delete("") is False


class TestApplyTransformations:
    """Tests for Pillow-side image effects."""

    def test_png_keeps_format(self, tmp_path: Path, image_factory: Callable[..., bytes]) -> None:
        source = tmp_path / "in.png"
        target = tmp_path / "out.png"
        source.write_bytes(image_factory("PNG", (30, 30)))

        apply_transformations(source, target, [Transformation(effect="contrast", amount=-50)])

        with Image.open(target) as img:
            assert img.format == "PNG"
            assert img.size == (30, 30)

    def test_darkening_lowers_pixel_values(
        self,
        tmp_path: Path,
        image_factory: Callable[..., bytes],
    ) -> None:
        source = tmp_path / "in.png"
        target = tmp_path / "out.png"
        source.write_bytes(image_factory("PNG", (8, 8)))

        apply_transformations(source, target, [Transformation(effect="brightness", amount=-100)])

        with Image.open(target) as img:
            assert img.getpixel((0, 0)) == (0, 0, 0)


def test_configured_backend_is_local() -> None:
    assert isinstance(get_storage_service(), LocalStorage)
