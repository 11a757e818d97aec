from app.schemas.asset import CropBox, Transformation
from app.schemas.auth import TokenData
from app.schemas.blog import (
    AuthorResponse,
    BlogDraft,
    BlogPatch,
    BlogResponse,
    CategoryBlogsResponse,
    CategoryResponse,
    MessageResponse,
    Meta,
    MetaPatch,
    Section,
    SectionInput,
)
from app.schemas.health import HealthCheckResponse
from app.schemas.pagination import PaginationInfo

__all__ = [
    "AuthorResponse",
    "BlogDraft",
    "BlogPatch",
    "BlogResponse",
    "CategoryBlogsResponse",
    "CategoryResponse",
    "CropBox",
    "HealthCheckResponse",
    "MessageResponse",
    "Meta",
    "MetaPatch",
    "PaginationInfo",
    "Section",
    "SectionInput",
    "TokenData",
    "Transformation",
]
