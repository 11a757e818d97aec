"""
Database initialization and seeding script.

Creates missing tables and makes sure the default categories exist, so a
fresh environment can accept blog posts straight away.

Note:
    Production schema is managed by Alembic migrations.
    Run 'alembic upgrade head' before seeding a production database.
"""

from asyncio import run as asyncio_run
from logging import getLogger

from app.db.database import init_db, transaction
from app.errors.database import DatabaseInitializationError
from app.models import CategoryDB
from app.repositories import CategoryRepository
from app.utils.helpers import file_logger

logger = file_logger(getLogger(__name__))

DEFAULT_CATEGORIES: list[tuple[str, str, str]] = [
    ("Technology", "technology", "Programming, software and tech trends"),
    ("Travel", "travel", "Travel experiences, tips and destination guides"),
    ("Food & Cooking", "food-cooking", "Recipes, techniques and food culture"),
    ("Lifestyle", "lifestyle", "Productivity and everyday life"),
]


async def seed_categories() -> int:
    """Insert each default category whose slug is not taken; return how many were added."""
    added = 0
    async with transaction() as session:
        repo = CategoryRepository(session)
        for name, slug, description in DEFAULT_CATEGORIES:
            if await repo.get_by_slug(slug):
                continue
            await repo.add(
                CategoryDB(name=name, slug=slug, description=description, status="published"),
            )
            added += 1
    return added


async def main() -> None:
    """Create tables and seed default categories."""
    try:
        logger.info("Verifying database connection...")
        await init_db()
        added = await seed_categories()
        logger.info(f"Database ready! {added} categories added.")
    except Exception as e:
        logger.exception("Failed to initialize database")
        raise DatabaseInitializationError from e


if __name__ == "__main__":
    asyncio_run(main())
