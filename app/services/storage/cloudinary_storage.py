"""
Cloudinary storage implementation.

This module provides the Cloudinary backend used in production. Uploads
are sent from the staged file with the requested effects applied on the
Cloudinary side.
"""

import asyncio
from collections.abc import Sequence
from functools import partial
from pathlib import Path
from typing import Any

import cloudinary
import cloudinary.uploader

from app.configs.settings import settings
from app.schemas.asset import Transformation
from app.services.storage.base import asset_id_from_url


def to_cloudinary(transformations: Sequence[Transformation]) -> list[dict[str, Any]]:
    """
    Map effects to Cloudinary transformation steps.

    ``crop`` becomes an explicit crop box; scalar effects become
    ``{"effect": "<name>:<amount>"}``.
    """
    steps: list[dict[str, Any]] = []
    for step in transformations:
        if step.effect == "crop" and step.box is not None:
            steps.append(
                {
                    "crop": "crop",
                    "x": step.box.x,
                    "y": step.box.y,
                    "width": step.box.width,
                    "height": step.box.height,
                },
            )
        else:
            steps.append({"effect": f"{step.effect}:{step.amount}"})
    return steps


class CloudinaryStorage:
    """
    Cloudinary storage implementation.

    Every blog asset lives in the ``BLOG_ASSET_FOLDER`` folder; its public id
    is that folder plus the identifier derived from the delivery URL.
    """

    def __init__(self) -> None:
        """Initialize Cloudinary with configured credentials."""
        cloudinary.config(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET.get_secret_value(),
            secure=True,
        )
        self.folder = settings.BLOG_ASSET_FOLDER

    def _get_public_id(self, url: str) -> str:
        """
        Get the Cloudinary public ID for a delivery URL.

        Args:
            url: Delivery URL returned by a previous upload

        Returns:
            str: Cloudinary public ID
        """
        return f"{self.folder}/{asset_id_from_url(url)}"

    async def upload(
        self,
        path: Path,
        field: str,
        transformations: Sequence[Transformation] = (),
    ) -> str:
        """
        Upload a staged image to Cloudinary.

        Args:
            path: Staged file on local disk
            field: Form field the file arrived in
            transformations: Ordered effects applied by Cloudinary

        Returns:
            str: Cloudinary secure URL to the uploaded image
        """
        upload_options: dict[str, Any] = {
            "folder": self.folder,
            "resource_type": "image",
            "use_filename": True,
            "unique_filename": True,
            "filename_override": field,
        }
        if transformations:
            upload_options["transformation"] = to_cloudinary(transformations)

        # Run blocking Cloudinary upload in thread pool
        loop = asyncio.get_event_loop()
        result = await loop.run_in_executor(
            None,
            partial(cloudinary.uploader.upload, str(path), **upload_options),
        )

        return result["secure_url"]

    async def delete(self, url: str) -> bool:
        """
        Delete an image from Cloudinary.

        Args:
            url: Delivery URL returned by ``upload``

        Returns:
            bool: True if deletion was successful, False otherwise
        """
        public_id = self._get_public_id(url)

        loop = asyncio.get_event_loop()
        result = await loop.run_in_executor(
            None,
            partial(cloudinary.uploader.destroy, public_id, resource_type="image"),
        )

        return result.get("result") == "ok"
