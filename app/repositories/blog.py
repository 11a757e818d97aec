"""Blog repository for database operations."""

from logging import getLogger
from typing import Any, NamedTuple
from uuid import UUID

from sqlalchemy import desc, func, or_, select
from sqlalchemy.sql import Select

from app.models.blog import BlogDB, utc_now
from app.models.category import CategoryDB
from app.models.user import UserDB
from app.repositories.base import BaseRepository
from app.utils.helpers import file_logger, slugify

logger = file_logger(getLogger(__name__))


class BlogRecord(NamedTuple):
    """A blog row with its category and author joined in."""

    blog: BlogDB
    category: CategoryDB
    author: UserDB | None


def _joined() -> Select[tuple[BlogDB, CategoryDB, UserDB]]:
    return (
        select(BlogDB, CategoryDB, UserDB)
        .join(CategoryDB, CategoryDB.id == BlogDB.category_id)
        .outerjoin(UserDB, UserDB.id == BlogDB.author_id)
    )


class BlogRepository(BaseRepository[BlogDB]):
    """
    Repository for Blog database operations.

    Reads return ``BlogRecord`` tuples, newest first; writes work on the
    bare ``BlogDB`` row and only flush, leaving the commit to the caller.
    """

    model = BlogDB

    async def unique_slug(self, title: str) -> str:
        """
        Derive a slug from ``title`` that no stored blog uses yet.

        Collisions get ``-2``, ``-3`` and so on; the first free suffix wins.

        Args:
            title: Blog title

        Returns:
            str: Unused slug
        """
        base = slugify(title)
        result = await self.session.execute(
            select(BlogDB.slug).where(or_(BlogDB.slug == base, BlogDB.slug.like(f"{base}-%"))),
        )
        taken = set(result.scalars().all())
        if base not in taken:
            return base

        suffix = 2
        while f"{base}-{suffix}" in taken:
            suffix += 1
        return f"{base}-{suffix}"

    async def create(self, author_id: UUID, **fields: Any) -> BlogDB:
        """
        Create a new blog post in the database.

        Args:
            author_id: UUID of the blog author
            **fields: Column values; ``slug`` is derived from ``title``

        Returns:
            BlogDB: Created blog database model

        Raises:
            DuplicateEntryError: If the slug was taken concurrently
            DatabaseError: For other database errors
        """
        slug = await self.unique_slug(fields["title"])
        db_blog = BlogDB(author_id=author_id, slug=slug, **fields)
        return await self._add_and_refresh(db_blog)

    async def update(self, blog: BlogDB, **fields: Any) -> BlogDB:
        """
        Apply changed fields to a stored blog; the slug is left untouched.

        Args:
            blog: Loaded blog row
            **fields: Column values to replace

        Returns:
            BlogDB: Updated blog database model
        """
        for key, value in fields.items():
            setattr(blog, key, value)
        blog.updated_at = utc_now()
        return await self._add_and_refresh(blog)

    async def get_record(self, blog_id: UUID) -> BlogRecord | None:
        """
        Get a blog by ID with category and author.

        Args:
            blog_id: Blog UUID

        Returns:
            BlogRecord | None: Record if found, None otherwise
        """
        result = await self.session.execute(_joined().where(BlogDB.id == blog_id))
        row = result.first()
        return BlogRecord(*row) if row else None

    async def get_by_slug(self, slug: str) -> BlogRecord | None:
        """
        Get a blog by slug with category and author.

        Args:
            slug: Blog slug

        Returns:
            BlogRecord | None: Record if found, None otherwise
        """
        result = await self.session.execute(_joined().where(BlogDB.slug == slug))
        row = result.first()
        return BlogRecord(*row) if row else None

    async def get_all(self) -> list[BlogRecord]:
        """
        Get every blog, newest first.

        Returns:
            list[BlogRecord]: All blogs with category and author
        """
        result = await self.session.execute(_joined().order_by(desc(BlogDB.created_at)))
        return [BlogRecord(*row) for row in result.all()]

    async def get_published_by_category(
        self,
        category_id: UUID,
        page: int,
        limit: int,
    ) -> tuple[list[BlogRecord], int]:
        """
        Get one page of a category's published blogs, newest first.

        Args:
            category_id: Category UUID
            page: 1-based page number
            limit: Page size

        Returns:
            tuple[list[BlogRecord], int]: The page and the total match count
        """
        conditions = (BlogDB.category_id == category_id, BlogDB.status == "published")

        count_result = await self.session.execute(
            select(func.count()).select_from(BlogDB).where(*conditions),
        )
        total = count_result.scalar() or 0

        result = await self.session.execute(
            _joined()
            .where(*conditions)
            .order_by(desc(BlogDB.created_at))
            .offset((page - 1) * limit)
            .limit(limit),
        )
        return [BlogRecord(*row) for row in result.all()], total
