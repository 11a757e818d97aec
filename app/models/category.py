"""Category database model using SQLModel."""

from datetime import UTC, datetime
from typing import cast
from uuid import UUID, uuid4

from sqlalchemy import DateTime
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String


class CategoryDB(SQLModel, table=True):
    """
    Category lookup table.

    Blogs reference a category by id; listing by slug additionally requires
    the category itself to be published.
    """

    __tablename__ = cast("declared_attr[str]", "categories")

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="Category ID",
    )
    name: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Display name",
    )
    slug: str = Field(
        sa_column=Column(String(120), unique=True, nullable=False, index=True),
        description="URL-friendly slug (unique)",
    )
    description: str | None = Field(
        default=None,
        sa_column=Column(String(500)),
        description="Category description",
    )
    status: str = Field(
        default="draft",
        sa_column=Column(String(20), nullable=False, index=True),
        description="Category status (draft, published)",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Creation timestamp",
    )
