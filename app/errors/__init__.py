from app.errors.base import (
    BaseAppError,
    InternalError,
    create_exception_handler,
    unhandled_exception_handler,
)
from app.errors.blog import (
    BlogInputError,
    ForbiddenError,
    InvalidFormatError,
    InvalidReferenceError,
    MissingFieldError,
    MissingSectionAssetError,
    NotFoundError,
    blog_exception_handler,
)
from app.errors.database import (
    DatabaseConnectionError,
    DatabaseError,
    DatabaseInitializationError,
    DuplicateEntryError,
    database_exception_handler,
)
from app.errors.upload import (
    ImageTooLargeError,
    MediaLimitExceededError,
    UnsupportedImageTypeError,
    UploadError,
    upload_exception_handler,
)
from app.errors.validation import validation_exception_handler

__all__ = [
    "BaseAppError",
    "BlogInputError",
    "DatabaseConnectionError",
    "DatabaseError",
    "DatabaseInitializationError",
    "DuplicateEntryError",
    "ForbiddenError",
    "ImageTooLargeError",
    "InternalError",
    "InvalidFormatError",
    "InvalidReferenceError",
    "MediaLimitExceededError",
    "MissingFieldError",
    "MissingSectionAssetError",
    "NotFoundError",
    "UnsupportedImageTypeError",
    "UploadError",
    "blog_exception_handler",
    "create_exception_handler",
    "database_exception_handler",
    "unhandled_exception_handler",
    "upload_exception_handler",
    "validation_exception_handler",
]
