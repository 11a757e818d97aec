"""Blog database model using SQLModel."""

from datetime import UTC, datetime
from typing import Any, cast
from uuid import UUID, uuid4

from pydantic import ConfigDict
from sqlalchemy import JSON, Boolean, DateTime, Index, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, SQLModel, String

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONDocument = JSON().with_variant(JSONB(), "postgresql")


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


class BlogDB(SQLModel, table=True):
    """
    Blog database model.

    Sections and meta are embedded documents stored as JSON; ``sections``
    keeps list order and every entry carries ``order`` equal to its index.
    """

    __tablename__ = cast("declared_attr[str]", "blogs")

    __table_args__ = (
        Index("ix_blogs_category_status_created", "category_id", "status", "created_at"),
        Index("ix_blogs_author_status", "author_id", "status"),
    )

    # Primary key
    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="Blog ID",
    )

    # Foreign keys
    author_id: UUID = Field(
        sa_column=Column(
            "author_id",
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        description="Author ID (foreign key to users.id)",
    )
    category_id: UUID = Field(
        sa_column=Column(
            "category_id",
            ForeignKey("categories.id", ondelete="RESTRICT"),
            nullable=False,
            index=True,
        ),
        description="Category ID (foreign key to categories.id)",
    )

    # Required fields
    title: str = Field(
        sa_column=Column(String(200), nullable=False),
        description="Blog title",
    )
    slug: str = Field(
        sa_column=Column(String(220), unique=True, nullable=False, index=True),
        description="URL-friendly slug (unique)",
    )
    description: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Blog description",
    )
    main_image: str | None = Field(
        default=None,
        sa_column=Column(String(1000)),
        description="Main image asset URL",
    )

    # Flags
    featured: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False),
        description="Featured flag",
    )
    status: str = Field(
        default="draft",
        sa_column=Column(String(20), nullable=False, index=True),
        description="Blog status (draft, published)",
    )

    # Embedded documents
    tags: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSONDocument, nullable=False),
        description="Ordered, de-duplicated tags",
    )
    sections: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSONDocument, nullable=False),
        description="Ordered content sections",
    )
    meta: dict[str, Any] = Field(
        default_factory=dict,
        sa_column=Column(JSONDocument, nullable=False),
        description="SEO metadata",
    )

    # Timestamps (timezone-aware)
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
        description="Creation timestamp",
    )
    updated_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True)),
        description="Last update timestamp",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "author_id": "123e4567-e89b-12d3-a456-426614174000",
                "category_id": "0b0c5a1e-4f53-4a8e-9f0e-2b5f1b7d9c11",
                "title": "Five Tips for Better Sourdough",
                "slug": "five-tips-for-better-sourdough",
                "description": "Practical advice for home bakers.",
                "main_image": "https://res.cloudinary.com/demo/image/upload/v1/blogs/main.jpg",
                "featured": False,
                "status": "draft",
                "tags": ["baking", "bread"],
                "sections": [
                    {
                        "section_img": "https://res.cloudinary.com/demo/image/upload/v1/blogs/s0.jpg",
                        "section_title": "Starter",
                        "section_description": "Feed it twice a day.",
                        "section_list": [],
                        "order": 0,
                    },
                ],
                "meta": {
                    "meta_title": "Sourdough tips",
                    "meta_description": "Five tips for better bread",
                    "meta_keywords": ["sourdough"],
                },
            },
        },
    )
