"""
Blog service.

Coordinates validation, asset uploads and persistence for blog writes, and
shapes stored rows into API responses for reads.
"""

from collections.abc import Sequence
from logging import getLogger
from typing import Any, cast
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.errors.blog import ForbiddenError, InvalidFormatError, NotFoundError
from app.models.blog import BlogDB
from app.models.category import CategoryDB
from app.models.user import UserDB
from app.repositories.blog import BlogRecord, BlogRepository
from app.repositories.category import CategoryRepository
from app.schemas.blog import (
    AuthorResponse,
    BlogResponse,
    CategoryBlogsResponse,
    CategoryResponse,
    Meta,
    MetaPatch,
    Section,
    SectionInput,
)
from app.schemas.pagination import PaginationInfo
from app.services.assets import AssetBatch, AssetUploader, StagedFile
from app.services.validation import (
    BlogForm,
    SectionSource,
    plan_section_images,
    validate_create,
    validate_update,
)
from app.utils.helpers import file_logger, format_datetime, parse_uuid

logger = file_logger(getLogger(__name__))


def to_response(record: BlogRecord) -> BlogResponse:
    """Build the API representation of a joined blog row."""
    blog, category, author = record
    return BlogResponse(
        id=blog.id,
        title=blog.title,
        slug=blog.slug,
        description=blog.description,
        tags=list(blog.tags),
        category=CategoryResponse.model_validate(category),
        featured=blog.featured,
        status=blog.status,
        main_image=blog.main_image,
        sections=[Section.model_validate(section) for section in blog.sections],
        meta=Meta.model_validate(blog.meta),
        author=AuthorResponse.model_validate(author) if author else None,
        created_at=format_datetime(blog.created_at) or "",
        updated_at=format_datetime(blog.updated_at),
    )


def build_sections(descriptors: Sequence[SectionInput], images: Sequence[str]) -> list[dict[str, Any]]:
    """Pair descriptors with their image URLs; ``order`` is the list position."""
    return [
        Section(
            section_img=image,
            section_title=descriptor.section_title,
            section_description=descriptor.section_description,
            section_list=descriptor.section_list,
            order=position,
        ).model_dump()
        for position, (descriptor, image) in enumerate(zip(descriptors, images, strict=True))
    ]


def merge_meta(stored: dict[str, Any], patch: MetaPatch | None) -> dict[str, Any]:
    """Overlay supplied meta fields on the stored block, field by field."""
    current = Meta.model_validate(stored)
    if patch is None:
        return current.model_dump()
    return Meta(
        meta_title=patch.meta_title or current.meta_title,
        meta_description=patch.meta_description or current.meta_description,
        meta_keywords=(
            patch.meta_keywords if patch.meta_keywords is not None else current.meta_keywords
        ),
    ).model_dump()


def referenced_assets(blog: BlogDB) -> list[str]:
    """Every asset URL a blog points at: section images first, then the main image."""
    urls = [section.get("section_img") for section in blog.sections]
    urls.append(blog.main_image)
    return [url for url in dict.fromkeys(urls) if url]


class BlogService:
    """
    Service for blog operations.

    Writes run inside an ``AssetBatch`` and commit before leaving it, so a
    failed commit still removes the assets uploaded for the request.
    """

    def __init__(self, session: AsyncSession, uploader: AssetUploader) -> None:
        """
        Initialize the service.

        Args:
            session: Async database session
            uploader: Asset uploader bound to the configured storage backend
        """
        self.session = session
        self.uploader = uploader
        self.blogs = BlogRepository(session)
        self.categories = CategoryRepository(session)

    async def _get_record(self, blog_id: str) -> BlogRecord:
        blog_uuid = parse_uuid(blog_id)
        record = await self.blogs.get_record(blog_uuid) if blog_uuid else None
        if record is None:
            raise NotFoundError("Blog post", blog_id)
        return record

    @staticmethod
    def _ensure_can_modify(blog: BlogDB, user: UserDB) -> None:
        if user.role != "admin" and blog.author_id != user.id:
            raise ForbiddenError

    async def _load(self, blog_id: UUID) -> BlogResponse:
        record = await self.blogs.get_record(blog_id)
        if record is None:
            raise NotFoundError("Blog post", str(blog_id))
        return to_response(record)

    async def _upload_sections(
        self,
        batch: AssetBatch,
        plan: Sequence[SectionSource],
        staged: Sequence[StagedFile],
    ) -> list[str]:
        """Upload planned section files strictly in section order."""
        urls: list[str] = []
        for kind, value in plan:
            if kind == "file":
                urls.append(await batch.upload(staged[int(value)]))
            else:
                urls.append(str(value))
        return urls

    # Reads

    async def list_blogs(self) -> list[BlogResponse]:
        """Every blog, newest first."""
        return [to_response(record) for record in await self.blogs.get_all()]

    async def get_by_slug(self, slug: str) -> BlogResponse:
        """
        Get one blog by slug.

        Raises:
            NotFoundError: If no blog has this slug
        """
        record = await self.blogs.get_by_slug(slug)
        if record is None:
            raise NotFoundError("Blog post", slug)
        return to_response(record)

    async def _category_page(
        self,
        category: CategoryDB,
        page: int,
        limit: int,
    ) -> CategoryBlogsResponse:
        records, total = await self.blogs.get_published_by_category(category.id, page, limit)
        return CategoryBlogsResponse(
            blogs=[to_response(record) for record in records],
            pagination=PaginationInfo.build(total=total, page=page, limit=limit),
            category=CategoryResponse.model_validate(category),
        )

    async def list_by_category_id(
        self,
        category_id: str,
        page: int,
        limit: int,
    ) -> CategoryBlogsResponse:
        """
        Page through a category's published blogs, by category id.

        Raises:
            InvalidFormatError: If ``category_id`` is not a UUID
            NotFoundError: If the category does not exist
        """
        category_uuid = parse_uuid(category_id)
        if category_uuid is None:
            raise InvalidFormatError("category_id", "not a valid id")
        category = await self.categories.get_by_id(category_uuid)
        if category is None:
            raise NotFoundError("Category", category_id)
        return await self._category_page(category, page, limit)

    async def list_by_category_slug(
        self,
        slug: str,
        page: int,
        limit: int,
    ) -> CategoryBlogsResponse:
        """
        Page through a category's published blogs, by category slug.

        Only published categories are reachable this way.

        Raises:
            NotFoundError: If no published category has this slug
        """
        category = await self.categories.get_by_slug(slug, published_only=True)
        if category is None:
            raise NotFoundError("Category", slug)
        return await self._category_page(category, page, limit)

    # Writes

    async def create(
        self,
        form: BlogForm,
        main_image: UploadFile | None,
        section_images: Sequence[UploadFile],
        author: UserDB,
    ) -> BlogResponse:
        """
        Create a blog post.

        Validates the form, uploads the main image and then each section
        image in order, and stores the post with ``author`` as its author.
        """
        draft = await validate_create(form, self.categories)
        plan = plan_section_images(
            draft.sections,
            [upload.filename or "" for upload in section_images],
        )

        async with (
            self.uploader.staging(main_image, section_images) as staged,
            self.uploader.batch() as batch,
        ):
            main_file = cast("StagedFile", staged.main_image)
            main_url = await batch.upload(main_file, draft.main_image_edit)
            section_urls = await self._upload_sections(batch, plan, staged.section_images)

            blog = await self.blogs.create(
                author_id=author.id,
                title=draft.title,
                description=draft.description,
                category_id=draft.category_id,
                tags=draft.tags,
                featured=draft.featured,
                status=draft.status,
                main_image=main_url,
                sections=build_sections(draft.sections, section_urls),
                meta=draft.meta.model_dump(),
            )
            await self.session.commit()

        logger.info(f"Blog '{blog.slug}' created by {author.id}")
        return await self._load(blog.id)

    async def update(
        self,
        blog_id: str,
        form: BlogForm,
        main_image: UploadFile | None,
        section_images: Sequence[UploadFile],
        user: UserDB,
    ) -> BlogResponse:
        """
        Partially update a blog post.

        Absent fields keep their stored values; supplied sections replace
        the stored list. Assets the post no longer references are removed
        after the change is committed.

        Raises:
            NotFoundError: If the blog does not exist
            ForbiddenError: If ``user`` is neither the author nor an admin
        """
        blog, _, _ = await self._get_record(blog_id)
        self._ensure_can_modify(blog, user)
        previous = referenced_assets(blog)
        patch = await validate_update(form, self.categories)
        plan = None
        if patch.sections is not None:
            plan = plan_section_images(
                patch.sections,
                [upload.filename or "" for upload in section_images],
                previous,
            )

        changes: dict[str, Any] = patch.model_dump(
            exclude_none=True,
            include={"title", "description", "category_id", "tags", "featured", "status"},
        )

        async with (
            self.uploader.staging(main_image, section_images if plan else []) as staged,
            self.uploader.batch() as batch,
        ):
            if staged.main_image is not None:
                changes["main_image"] = await batch.upload(
                    staged.main_image,
                    patch.main_image_edit,
                )
            if plan is not None and patch.sections is not None:
                section_urls = await self._upload_sections(batch, plan, staged.section_images)
                changes["sections"] = build_sections(patch.sections, section_urls)
            changes["meta"] = merge_meta(blog.meta, patch.meta)

            blog = await self.blogs.update(blog, **changes)
            await self.session.commit()

        current = set(referenced_assets(blog))
        superseded = [url for url in previous if url not in current]
        if superseded:
            await self.uploader.delete_many(superseded)

        logger.info(f"Blog '{blog.slug}' updated")
        return await self._load(blog.id)

    async def delete(self, blog_id: str, user: UserDB) -> None:
        """
        Delete a blog post and every image it references.

        Raises:
            NotFoundError: If the blog does not exist
            ForbiddenError: If ``user`` is neither the author nor an admin
        """
        blog, _, _ = await self._get_record(blog_id)
        self._ensure_can_modify(blog, user)
        await self.uploader.delete_many(referenced_assets(blog))
        await self.blogs.delete(blog)
        await self.session.commit()
        logger.info(f"Blog '{blog.slug}' deleted")
