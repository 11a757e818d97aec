"""Category repository for database operations."""

from sqlalchemy import select

from app.models.category import CategoryDB
from app.repositories.base import BaseRepository


class CategoryRepository(BaseRepository[CategoryDB]):
    """Read access to categories; blogs only ever look them up."""

    model = CategoryDB

    async def get_by_slug(self, slug: str, *, published_only: bool = False) -> CategoryDB | None:
        """
        Get a category by slug.

        Args:
            slug: Category slug
            published_only: Ignore categories that are not published

        Returns:
            CategoryDB | None: Category if found, None otherwise
        """
        query = select(CategoryDB).where(CategoryDB.slug == slug)
        if published_only:
            query = query.where(CategoryDB.status == "published")
        result = await self.session.execute(query)
        return result.scalar_one_or_none()
