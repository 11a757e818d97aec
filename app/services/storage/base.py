"""
Base storage protocol for blog asset operations.

This module defines the interface every storage backend implements,
allowing the uploader to work against local disk or Cloudinary alike.
"""

from abc import abstractmethod
from collections.abc import Sequence
from pathlib import Path, PurePosixPath
from typing import Protocol
from urllib.parse import urlparse

from app.schemas.asset import Transformation


def asset_id_from_url(url: str) -> str:
    """
    Derive the asset identifier from a stored URL.

    The identifier is the last path segment without its extension, so
    ``https://cdn/x/blogs/main_image-1700000000000-ab12cd34.jpg`` maps to
    ``main_image-1700000000000-ab12cd34``.
    """
    return PurePosixPath(urlparse(url).path).stem


class AssetStorage(Protocol):
    """
    Protocol defining the interface for asset storage backends.

    Implementations own the stored bytes; they never touch the staged
    source file beyond reading it.
    """

    @abstractmethod
    async def upload(
        self,
        path: Path,
        field: str,
        transformations: Sequence[Transformation] = (),
    ) -> str:
        """
        Store a staged image and return its public URL.

        Args:
            path: Staged file on local disk
            field: Form field the file arrived in, used to name the asset
            transformations: Ordered effects to apply before storing

        Returns:
            str: Public URL of the stored asset
        """
        ...

    @abstractmethod
    async def delete(self, url: str) -> bool:
        """
        Remove a stored asset by its URL.

        Args:
            url: URL previously returned by ``upload``

        Returns:
            bool: True if the backend confirmed the removal, False otherwise
        """
        ...
