"""
Storage services package.

This package provides storage backends for blog assets,
with support for local filesystem and Cloudinary.
"""

from app.configs.settings import settings
from app.services.storage.base import AssetStorage, asset_id_from_url
from app.services.storage.cloudinary_storage import CloudinaryStorage
from app.services.storage.local import LocalStorage


def get_storage_service() -> AssetStorage:
    """
    Get the configured storage service.

    Returns the appropriate storage implementation based on
    the STORAGE_PROVIDER setting.

    Returns:
        AssetStorage: Configured storage service instance
    """
    if settings.STORAGE_PROVIDER == "cloudinary":
        return CloudinaryStorage()
    return LocalStorage()


__all__ = [
    "AssetStorage",
    "CloudinaryStorage",
    "LocalStorage",
    "asset_id_from_url",
    "get_storage_service",
]
