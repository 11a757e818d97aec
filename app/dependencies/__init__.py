# app/dependencies/__init__.py

from app.dependencies.dependencies import (
    BlogServiceDep,
    CurrentUserDep,
    PageQuery,
    PageQueryDep,
    SessionDep,
    UploaderDep,
    get_asset_uploader,
    get_blog_service,
    get_current_user,
    get_page_query,
    get_storage,
)

__all__ = [
    "BlogServiceDep",
    "CurrentUserDep",
    "PageQuery",
    "PageQueryDep",
    "SessionDep",
    "UploaderDep",
    "get_asset_uploader",
    "get_blog_service",
    "get_current_user",
    "get_page_query",
    "get_storage",
]
