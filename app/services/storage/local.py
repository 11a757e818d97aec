"""
Local filesystem storage implementation.

This module provides a local storage backend for development and tests.
Files live under ``UPLOADS_DIR/<BLOG_ASSET_FOLDER>`` and are served by the
``/uploads`` static mount.
"""

import asyncio
from collections.abc import Sequence
from functools import partial
from pathlib import Path
from time import time_ns
from uuid import uuid4

import aiofiles
from PIL import Image, ImageEnhance

from app.configs.settings import settings
from app.schemas.asset import Transformation
from app.services.storage.base import asset_id_from_url

ENHANCERS = {
    "brightness": ImageEnhance.Brightness,
    "contrast": ImageEnhance.Contrast,
    "saturation": ImageEnhance.Color,
}


def apply_transformations(
    source: Path,
    target: Path,
    transformations: Sequence[Transformation],
) -> None:
    """
    Apply effects with Pillow, in order, and save to ``target``.

    Scalar amounts map to an enhancement factor of ``1 + amount / 100``.
    """
    with Image.open(source) as opened:
        img = opened.copy()
        image_format = opened.format

    for step in transformations:
        if step.effect == "crop" and step.box is not None:
            box = step.box
            img = img.crop((box.x, box.y, box.x + box.width, box.y + box.height))
        elif step.amount is not None:
            if img.mode not in ("RGB", "RGBA", "L"):
                img = img.convert("RGB")
            img = ENHANCERS[step.effect](img).enhance(1 + step.amount / 100)

    if image_format == "JPEG" and img.mode == "RGBA":
        img = img.convert("RGB")
    img.save(target, format=image_format)


class LocalStorage:
    """
    Local filesystem storage implementation.

    Asset names follow ``<field>-<epoch ms>-<8 hex chars><ext>`` so the
    identifier derived from a URL is unique per upload.
    """

    def __init__(
        self,
        uploads_dir: Path | None = None,
        base_url: str | None = None,
    ) -> None:
        """Initialize local storage with configured paths."""
        self.uploads_dir = uploads_dir or settings.UPLOADS_DIR
        self.folder = settings.BLOG_ASSET_FOLDER
        self.base_path = self.uploads_dir / self.folder
        self.base_url = (base_url or settings.PUBLIC_BASE_URL).rstrip("/")
        self._ensure_directory()

    def _ensure_directory(self) -> None:
        """Ensure the upload directory exists."""
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _new_name(self, field: str, suffix: str) -> str:
        return f"{field}-{time_ns() // 1_000_000}-{uuid4().hex[:8]}{suffix.lower()}"

    def _url_for(self, name: str) -> str:
        return f"{self.base_url}/uploads/{self.folder}/{name}"

    async def upload(
        self,
        path: Path,
        field: str,
        transformations: Sequence[Transformation] = (),
    ) -> str:
        """
        Copy a staged image into the uploads directory.

        Args:
            path: Staged file on local disk
            field: Form field the file arrived in
            transformations: Ordered effects to apply with Pillow

        Returns:
            str: Public URL of the stored image
        """
        target = self.base_path / self._new_name(field, path.suffix)

        if transformations:
            loop = asyncio.get_event_loop()
            await loop.run_in_executor(
                None,
                partial(apply_transformations, path, target, list(transformations)),
            )
        else:
            async with aiofiles.open(path, "rb") as src:
                data = await src.read()
            async with aiofiles.open(target, "wb") as dst:
                await dst.write(data)

        return self._url_for(target.name)

    async def delete(self, url: str) -> bool:
        """
        Delete an image from the uploads directory.

        Args:
            url: URL returned by ``upload``

        Returns:
            bool: True if a file was removed, False otherwise
        """
        asset_id = asset_id_from_url(url)
        if not asset_id:
            return False

        removed = False
        for file_path in self.base_path.glob(f"{asset_id}.*"):
            file_path.unlink(missing_ok=True)
            removed = True
        return removed
