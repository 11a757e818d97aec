from app.services.assets import AssetBatch, AssetUploader, StagedFile, StagedUploads
from app.services.blog import BlogService
from app.services.validation import BlogForm, validate_create, validate_update

__all__ = [
    "AssetBatch",
    "AssetUploader",
    "BlogForm",
    "BlogService",
    "StagedFile",
    "StagedUploads",
    "validate_create",
    "validate_update",
]
