"""
Blog schemas.

Input models describe the normalized form of a multipart request after the
structured-text fields have been parsed; response models describe what the
API returns, with category and author joined in.
"""

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.asset import Transformation
from app.schemas.pagination import PaginationInfo

type PublishStatus = Literal["draft", "published"]


def dedupe(values: list[str]) -> list[str]:
    """Strip values, drop empties and repeats, keep first-seen order."""
    seen: dict[str, None] = {}
    for value in values:
        if cleaned := value.strip():
            seen.setdefault(cleaned, None)
    return list(seen)


class SectionInput(BaseModel):
    """
    Section descriptor as sent by the client.

    ``section_img`` is the URL kept from a previous version of the post;
    ``image_key`` binds the section to an uploaded file by filename.
    """

    model_config = ConfigDict(extra="ignore")

    section_title: str = ""
    section_description: str = ""
    section_list: list[str] = Field(default_factory=list)
    section_img: str | None = None
    image_key: str | None = None

    @field_validator("section_list", mode="after")
    @classmethod
    def clean_list(cls, v: list[str]) -> list[str]:
        return [item for item in v if item.strip()]


class Section(BaseModel):
    """Stored section; ``order`` always equals the position in the list."""

    section_img: str
    section_title: str = ""
    section_description: str = ""
    section_list: list[str] = Field(default_factory=list)
    order: int = Field(ge=0)


class Meta(BaseModel):
    """SEO metadata block."""

    meta_title: str = Field(min_length=1)
    meta_description: str = Field(min_length=1)
    meta_keywords: list[str] = Field(default_factory=list)

    @field_validator("meta_keywords", mode="after")
    @classmethod
    def clean_keywords(cls, v: list[str]) -> list[str]:
        return dedupe(v)


class MetaPatch(BaseModel):
    """Meta fields supplied on update; absent ones fall back to stored values."""

    meta_title: str | None = None
    meta_description: str | None = None
    meta_keywords: list[str] | None = None


class BlogDraft(BaseModel):
    """Validated, normalized input for creating a blog post."""

    title: str
    description: str
    category_id: UUID
    tags: list[str] = Field(default_factory=list)
    featured: bool = False
    status: PublishStatus = "draft"
    sections: list[SectionInput] = Field(default_factory=list)
    meta: Meta
    main_image_edit: list[Transformation] = Field(default_factory=list)


class BlogPatch(BaseModel):
    """Validated partial update; ``None`` means keep the stored value."""

    title: str | None = None
    description: str | None = None
    category_id: UUID | None = None
    tags: list[str] | None = None
    featured: bool | None = None
    status: PublishStatus | None = None
    sections: list[SectionInput] | None = None
    meta: MetaPatch | None = None
    main_image_edit: list[Transformation] = Field(default_factory=list)


class CategoryResponse(BaseModel):
    """Category as embedded in blog responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    description: str | None = None
    status: str


class AuthorResponse(BaseModel):
    """Author information for blog responses (without sensitive data)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str


class BlogResponse(BaseModel):
    """Blog response model with category and author resolved."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    title: str
    slug: str
    description: str
    tags: list[str]
    category: CategoryResponse | None
    featured: bool
    status: str
    main_image: str | None = Field(default=None, alias="mainImage")
    sections: list[Section]
    meta: Meta
    author: AuthorResponse | None
    created_at: str = Field(alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")


class CategoryBlogsResponse(BaseModel):
    """Published posts of one category, one page at a time."""

    blogs: list[BlogResponse]
    pagination: PaginationInfo
    category: CategoryResponse


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str
