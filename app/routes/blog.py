# app/routes/blog.py

"""
Blog Routes.

Provides CRUD endpoints and category listings for blog posts.

Summary
-------
Endpoints include:
  - Create blog (multipart, admin only)
  - List blogs
  - List published blogs of a category, by category id or slug (paged)
  - Get blog by slug
  - Update blog (multipart, author or admin)
  - Delete blog (author or admin)

Dependencies
------------
  - `BlogServiceDep`: Service bound to the request's session and asset uploader.
  - `BlogUploadDep`: Multipart text fields and files of a write request.
"""

from dataclasses import dataclass, field
from logging import getLogger
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_201_CREATED

from app.auth import AdminUserDep, AuthorUserDep
from app.dependencies import BlogServiceDep, PageQueryDep
from app.schemas import BlogResponse, CategoryBlogsResponse, MessageResponse
from app.services.validation import BlogForm
from app.utils.helpers import file_logger

router = APIRouter(prefix="/blogs", tags=["📝 Blogs"])

logger = file_logger(getLogger(__name__))

BLOG_EXAMPLE = {
    "id": "7f1e0c1a-3a43-4bd2-9a55-31b7c1f0f6a2",
    "title": "Five Tips for Better Sourdough",
    "slug": "five-tips-for-better-sourdough",
    "description": "Practical advice for home bakers.",
    "tags": ["baking", "bread"],
    "category": {
        "id": "0b0c5a1e-4f53-4a8e-9f0e-2b5f1b7d9c11",
        "name": "Food",
        "slug": "food",
        "description": "Recipes and kitchen notes",
        "status": "published",
    },
    "featured": False,
    "status": "published",
    "mainImage": "https://res.cloudinary.com/demo/image/upload/v1/blogs/main_image_x1.jpg",
    "sections": [
        {
            "section_img": "https://res.cloudinary.com/demo/image/upload/v1/blogs/section_image_a1.jpg",
            "section_title": "Starter",
            "section_description": "Feed it twice a day.",
            "section_list": ["flour", "water"],
            "order": 0,
        },
    ],
    "meta": {
        "meta_title": "Sourdough tips",
        "meta_description": "Five tips for better bread",
        "meta_keywords": ["sourdough"],
    },
    "author": {
        "id": "123e4567-e89b-12d3-a456-426614174111",
        "name": "Ayu",
        "email": "ayu@example.com",
    },
    "createdAt": "2025-01-01T08:00:00+00:00",
    "updatedAt": None,
}

PAGE_EXAMPLE = {
    "blogs": [BLOG_EXAMPLE],
    "pagination": {"total": 15, "page": 1, "pages": 2, "limit": 10},
    "category": BLOG_EXAMPLE["category"],
}

BAD_REQUEST = {
    "description": "Invalid input",
    "content": {
        "application/json": {
            "example": {
                "detail": "Missing required fields: title, mainImage",
                "details": {"missing": ["title", "mainImage"]},
            },
        },
    },
}

NOT_FOUND = {
    "description": "Not found",
    "content": {"application/json": {"example": {"detail": "Blog post not found"}}},
}

NOT_OWNER = {
    "description": "Not the post's author or an admin",
    "content": {
        "application/json": {"example": {"detail": "You can only modify your own blog posts"}},
    },
}

SERVER_ERROR = {
    "description": "Upload or server failure",
    "content": {
        "application/json": {
            "example": {"detail": "Error uploading image", "error": "upload timed out after 30.0s"},
        },
    },
}


@dataclass(frozen=True)
class BlogUpload:
    """Text fields and files of a blog write request."""

    form: BlogForm
    main_image: UploadFile | None = None
    section_images: list[UploadFile] = field(default_factory=list)


def get_blog_upload(
    title: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
    category: Annotated[str | None, Form(description="Category id")] = None,
    tags: Annotated[str | None, Form(description="JSON list or comma-separated tags")] = None,
    featured: Annotated[str | None, Form(description='"true" or "false"')] = None,
    status: Annotated[str | None, Form(description='"draft" or "published"')] = None,
    sections: Annotated[str | None, Form(description="JSON list of section objects")] = None,
    meta: Annotated[str | None, Form(description="JSON meta object")] = None,
    main_image_edit: Annotated[
        str | None,
        Form(alias="mainImageEdit", description="JSON image edit instructions"),
    ] = None,
    main_image: Annotated[UploadFile | None, File(alias="mainImage")] = None,
    section_images: Annotated[list[UploadFile] | None, File()] = None,
) -> BlogUpload:
    """
    Dependency to collect the multipart fields of a blog write.

    Returns
    -------
    BlogUpload
        Raw form fields plus the uploaded files.
    """
    if main_image is not None and not main_image.filename:
        main_image = None
    files = [upload for upload in section_images or [] if upload.filename]

    form = BlogForm(
        title=title,
        description=description,
        category=category,
        tags=tags,
        featured=featured,
        status=status,
        sections=sections,
        meta=meta,
        main_image_edit=main_image_edit,
        has_main_image=main_image is not None,
    )
    return BlogUpload(form=form, main_image=main_image, section_images=files)


BlogUploadDep = Annotated[BlogUpload, Depends(get_blog_upload)]


@router.post(
    "/",
    response_class=ORJSONResponse,
    response_model=BlogResponse,
    status_code=HTTP_201_CREATED,
    summary="Create a new blog post",
    description=(
        "Create a blog post from a multipart form. `mainImage` is required; "
        "`section_images` (at most 10) are bound to sections by `image_key` "
        "or by position."
    ),
    responses={
        201: {"content": {"application/json": {"example": BLOG_EXAMPLE}}},
        400: BAD_REQUEST,
        401: {
            "description": "Not authenticated",
            "content": {"application/json": {"example": {"detail": "Could not validate credentials"}}},
        },
        403: {
            "description": "Forbidden",
            "content": {"application/json": {"example": {"detail": "Admin access required"}}},
        },
        500: SERVER_ERROR,
    },
    operation_id="blogs_create",
)
async def create_blog(
    upload: BlogUploadDep,
    service: BlogServiceDep,
    user: AdminUserDep,
) -> BlogResponse:
    """
    Create a new blog post.

    Parameters
    ----------
    upload : BlogUpload
        Multipart fields and files.
    service : BlogService
        Blog service dependency.
    user : UserDB
        Authenticated admin, recorded as the author.

    Returns
    -------
    BlogResponse
        Created blog data.
    """
    return await service.create(upload.form, upload.main_image, upload.section_images, user)


@router.get(
    "/",
    response_class=ORJSONResponse,
    response_model=list[BlogResponse],
    summary="List blog posts",
    description="List every blog post, newest first, with category and author.",
    responses={
        200: {"content": {"application/json": {"example": [BLOG_EXAMPLE]}}},
        500: SERVER_ERROR,
    },
    operation_id="blogs_list",
)
async def list_blogs(service: BlogServiceDep) -> list[BlogResponse]:
    """
    List all blog posts.

    Parameters
    ----------
    service : BlogService
        Blog service dependency.

    Returns
    -------
    list[BlogResponse]
        All blogs, newest first.
    """
    return await service.list_blogs()


@router.get(
    "/category/id/{category_id}",
    response_class=ORJSONResponse,
    response_model=CategoryBlogsResponse,
    summary="List published blogs of a category by id",
    responses={
        200: {"content": {"application/json": {"example": PAGE_EXAMPLE}}},
        400: {
            "description": "Malformed category id",
            "content": {
                "application/json": {
                    "example": {
                        "detail": "Invalid format for 'category_id': not a valid id",
                        "details": {"field": "category_id", "reason": "not a valid id"},
                    },
                },
            },
        },
        404: {
            "description": "Not found",
            "content": {"application/json": {"example": {"detail": "Category not found"}}},
        },
    },
    operation_id="blogs_by_category_id",
)
async def list_blogs_by_category_id(
    category_id: str,
    service: BlogServiceDep,
    paging: PageQueryDep,
) -> CategoryBlogsResponse:
    """
    Page through the published blogs of a category.

    Parameters
    ----------
    category_id : str
        Category identifier.
    service : BlogService
        Blog service dependency.
    paging : PageQuery
        Page number and size.

    Returns
    -------
    CategoryBlogsResponse
        One page of blogs, pagination info and the category.
    """
    return await service.list_by_category_id(category_id, paging.page, paging.limit)


@router.get(
    "/category/{slug}",
    response_class=ORJSONResponse,
    response_model=CategoryBlogsResponse,
    summary="List published blogs of a category by slug",
    description="The category itself must be published to be found by slug.",
    responses={
        200: {"content": {"application/json": {"example": PAGE_EXAMPLE}}},
        404: {
            "description": "Not found",
            "content": {"application/json": {"example": {"detail": "Category not found"}}},
        },
    },
    operation_id="blogs_by_category_slug",
)
async def list_blogs_by_category_slug(
    slug: str,
    service: BlogServiceDep,
    paging: PageQueryDep,
) -> CategoryBlogsResponse:
    """
    Page through the published blogs of a published category.

    Parameters
    ----------
    slug : str
        Category slug.
    service : BlogService
        Blog service dependency.
    paging : PageQuery
        Page number and size.

    Returns
    -------
    CategoryBlogsResponse
        One page of blogs, pagination info and the category.
    """
    return await service.list_by_category_slug(slug, paging.page, paging.limit)


@router.get(
    "/{slug}",
    response_class=ORJSONResponse,
    response_model=BlogResponse,
    summary="Get blog by slug",
    responses={
        200: {"content": {"application/json": {"example": BLOG_EXAMPLE}}},
        404: NOT_FOUND,
    },
    operation_id="blogs_get_by_slug",
)
async def get_blog_by_slug(slug: str, service: BlogServiceDep) -> BlogResponse:
    """
    Get a blog post by slug.

    Parameters
    ----------
    slug : str
        Blog slug.
    service : BlogService
        Blog service dependency.

    Returns
    -------
    BlogResponse
        Blog data.
    """
    return await service.get_by_slug(slug)


@router.put(
    "/{blog_id}",
    response_class=ORJSONResponse,
    response_model=BlogResponse,
    summary="Update blog post",
    description=(
        "Partially update a blog post from a multipart form. Absent fields keep "
        "their stored values; a supplied `sections` list replaces the stored one."
    ),
    responses={
        200: {"content": {"application/json": {"example": BLOG_EXAMPLE}}},
        400: BAD_REQUEST,
        403: NOT_OWNER,
        404: NOT_FOUND,
        500: SERVER_ERROR,
    },
    operation_id="blogs_update",
)
async def update_blog(
    blog_id: str,
    upload: BlogUploadDep,
    service: BlogServiceDep,
    user: AuthorUserDep,
) -> BlogResponse:
    """
    Update a blog post.

    Parameters
    ----------
    blog_id : str
        Blog identifier.
    upload : BlogUpload
        Multipart fields and files.
    service : BlogService
        Blog service dependency.
    user : UserDB
        Authenticated user; must be the post's author or an admin.

    Returns
    -------
    BlogResponse
        Updated blog data.
    """
    logger.info(f"Blog {blog_id} update requested by {user.id}")
    return await service.update(
        blog_id,
        upload.form,
        upload.main_image,
        upload.section_images,
        user,
    )


@router.delete(
    "/{blog_id}",
    response_class=ORJSONResponse,
    response_model=MessageResponse,
    summary="Delete blog post",
    description="Delete a blog post together with every image it references.",
    responses={
        200: {
            "content": {
                "application/json": {"example": {"message": "Blog post deleted successfully"}},
            },
        },
        403: NOT_OWNER,
        404: NOT_FOUND,
        500: SERVER_ERROR,
    },
    operation_id="blogs_delete",
)
async def delete_blog(
    blog_id: str,
    service: BlogServiceDep,
    user: AuthorUserDep,
) -> MessageResponse:
    """
    Delete a blog post.

    Parameters
    ----------
    blog_id : str
        Blog identifier.
    service : BlogService
        Blog service dependency.
    user : UserDB
        Authenticated user; must be the post's author or an admin.

    Returns
    -------
    MessageResponse
        Confirmation message.
    """
    logger.info(f"Blog {blog_id} deletion requested by {user.id}")
    await service.delete(blog_id, user)
    return MessageResponse(message="Blog post deleted successfully")
