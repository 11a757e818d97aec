"""User database model (identity only, as seen by the blog workflow)."""

from datetime import UTC, datetime
from typing import cast
from uuid import UUID, uuid4

from sqlalchemy import DateTime
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String


class UserDB(SQLModel, table=True):
    """
    Users that can author blog posts.

    Accounts are managed elsewhere; this table only backs the ``author``
    join and the role check of the authorization gate.
    """

    __tablename__ = cast("declared_attr[str]", "users")

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="User ID",
    )
    name: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Display name",
    )
    email: str = Field(
        sa_column=Column(String(255), unique=True, nullable=False, index=True),
        description="E-mail address",
    )
    role: str = Field(
        default="author",
        sa_column=Column(String(20), nullable=False),
        description="User role (author, admin)",
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Creation timestamp",
    )
