# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os
from tempfile import mkdtemp

# Settings are read once at import time, so the test environment must be in
# place before anything under app/ is imported
_TEST_ROOT = mkdtemp(prefix="blog-tests-")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "development"
os.environ["STORAGE_PROVIDER"] = "local"
os.environ["UPLOADS_DIR"] = f"{_TEST_ROOT}/uploads"
os.environ["UPLOAD_TMP_DIR"] = f"{_TEST_ROOT}/tmp"
os.environ["PUBLIC_BASE_URL"] = "http://test"
os.environ["LOG_TO_FILE"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key-with-enough-length-0123456789"

from collections.abc import AsyncGenerator, Callable, Sequence  # noqa: E402
from datetime import timedelta  # noqa: E402
from io import BytesIO  # noqa: E402
from pathlib import Path  # noqa: E402

import pytest  # noqa: E402
from PIL import Image  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402

from app.managers.token_manager import create_access_token  # noqa: E402
from app.models import BlogDB, CategoryDB, UserDB  # noqa: E402
from app.schemas.asset import Transformation  # noqa: E402


class FakeStorage:
    """
    In-memory stand-in for an ``AssetStorage`` backend.

    Records every call; ``fail_on_upload`` makes the n-th upload (1-based)
    raise, ``fail_deletes`` makes every delete raise.
    """

    def __init__(self, fail_on_upload: int | None = None, *, fail_deletes: bool = False) -> None:
        self.uploads: list[tuple[str, list[Transformation]]] = []
        self.deleted: list[str] = []
        self.fail_on_upload = fail_on_upload
        self.fail_deletes = fail_deletes
        self.stored: set[str] = set()

    async def upload(
        self,
        path: Path,
        field: str,
        transformations: Sequence[Transformation] = (),
    ) -> str:
        assert path.exists(), "uploads must read from a staged file"
        if self.fail_on_upload is not None and len(self.uploads) + 1 == self.fail_on_upload:
            self.uploads.append((field, list(transformations)))
            mssg = "remote storage unavailable"
            raise ConnectionError(mssg)
        self.uploads.append((field, list(transformations)))
        url = f"https://assets.test/blogs/{field}-{len(self.uploads)}.jpg"
        self.stored.add(url)
        return url

    async def delete(self, url: str) -> bool:
        if self.fail_deletes:
            mssg = "remote storage unavailable"
            raise ConnectionError(mssg)
        self.deleted.append(url)
        self.stored.discard(url)
        return True


def make_image_bytes(fmt: str = "JPEG", size: tuple[int, int] = (64, 48)) -> bytes:
    """Create valid image bytes with Pillow."""
    img = Image.new("RGB", size, color="red")
    buffer = BytesIO()
    img.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def fake_storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def valid_jpeg_bytes() -> bytes:
    """Create valid JPEG image bytes."""
    return make_image_bytes("JPEG")


@pytest.fixture
def valid_png_bytes() -> bytes:
    """Create valid PNG image bytes."""
    return make_image_bytes("PNG")


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Fresh in-memory database per test."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    async with session_maker() as session:
        yield session


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> UserDB:
    """Persisted admin user."""
    user = UserDB(name="Admin", email="admin@example.com", role="admin")
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture
async def author_user(db_session: AsyncSession) -> UserDB:
    """Persisted author user."""
    user = UserDB(name="Ayu", email="ayu@example.com", role="author")
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture
async def category(db_session: AsyncSession) -> CategoryDB:
    """Persisted, published category."""
    cat = CategoryDB(name="Food", slug="food", description="Recipes", status="published")
    db_session.add(cat)
    await db_session.commit()
    return cat


@pytest.fixture
async def draft_category(db_session: AsyncSession) -> CategoryDB:
    """Persisted category that is not published."""
    cat = CategoryDB(name="Drafts", slug="drafts", status="draft")
    db_session.add(cat)
    await db_session.commit()
    return cat


@pytest.fixture
def admin_headers(admin_user: UserDB) -> dict[str, str]:
    """Create auth headers with an admin access token."""
    token = create_access_token(admin_user.id, admin_user.role, timedelta(minutes=30))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def author_headers(author_user: UserDB) -> dict[str, str]:
    """Create auth headers with an author access token."""
    token = create_access_token(author_user.id, author_user.role, timedelta(minutes=30))
    return {"Authorization": f"Bearer {token}"}


def _build_blog(
    author: UserDB,
    category: CategoryDB,
    title: str = "Five Tips for Better Sourdough",
    **overrides: object,
) -> BlogDB:
    """Build an unsaved blog row with sensible defaults."""
    values: dict[str, object] = {
        "author_id": author.id,
        "category_id": category.id,
        "title": title,
        "slug": overrides.pop("slug", title.lower().replace(" ", "-")),
        "description": "Practical advice for home bakers.",
        "main_image": "https://assets.test/blogs/main_image-0.jpg",
        "featured": False,
        "status": "published",
        "tags": ["baking"],
        "sections": [
            {
                "section_img": "https://assets.test/blogs/section_image-0.jpg",
                "section_title": "Starter",
                "section_description": "Feed it twice a day.",
                "section_list": [],
                "order": 0,
            },
        ],
        "meta": {
            "meta_title": "Sourdough tips",
            "meta_description": "Five tips",
            "meta_keywords": ["sourdough"],
        },
    }
    values.update(overrides)
    return BlogDB(**values)


@pytest.fixture
def blog_factory() -> Callable[..., BlogDB]:
    """Expose the blog row builder to tests."""
    return _build_blog


@pytest.fixture
def storage_factory() -> type[FakeStorage]:
    """Expose ``FakeStorage`` so tests can configure failures."""
    return FakeStorage


@pytest.fixture
def image_factory() -> Callable[..., bytes]:
    """Expose the Pillow image builder to tests."""
    return make_image_bytes
