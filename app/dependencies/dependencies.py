# app/dependencies/dependencies.py

"""Application dependencies: sessions, services, paging and the bearer gate."""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, HTTPException, Query
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_401_UNAUTHORIZED

from app.configs import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from app.db import get_session
from app.managers.token_manager import decode_access_token
from app.models import UserDB
from app.repositories import UserRepository
from app.services import AssetUploader, BlogService
from app.services.storage import AssetStorage, get_storage_service

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

SessionDep = Annotated[AsyncSession, Depends(get_session)]


async def get_current_user(
    token: Annotated[str | None, Depends(oauth2_scheme)],
    session: SessionDep,
) -> UserDB:
    """
    Get current authenticated user using user_id from token claims.

    Parameters
    ----------
    token : str | None
        Bearer token, if one was sent.
    session : AsyncSession
        Database session.

    Returns
    -------
    UserDB
        Current authenticated user.

    Raises
    ------
    HTTPException
        401 when the token is missing, invalid, or names an unknown user.
    """
    token_data = decode_access_token(token) if token else None
    if not token_data:
        raise HTTPException(
            status_code=HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await UserRepository(session).get_by_id(token_data.user_id)
    if not user:
        raise HTTPException(
            status_code=HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


CurrentUserDep = Annotated[UserDB, Depends(get_current_user)]


def get_storage() -> AssetStorage:
    """Resolve the configured asset storage backend."""
    return get_storage_service()


def get_asset_uploader(
    storage: Annotated[AssetStorage, Depends(get_storage)],
) -> AssetUploader:
    """
    Resolve the `AssetUploader` dependency.

    Parameters
    ----------
    storage : AssetStorage
        Storage backend the uploader writes to.

    Returns
    -------
    AssetUploader
        Uploader bound to the backend.
    """
    return AssetUploader(storage)


UploaderDep = Annotated[AssetUploader, Depends(get_asset_uploader)]


def get_blog_service(session: SessionDep, uploader: UploaderDep) -> BlogService:
    """
    Resolve the `BlogService` dependency.

    Parameters
    ----------
    session : AsyncSession
        Database session.
    uploader : AssetUploader
        Asset uploader.

    Returns
    -------
    BlogService
        Service bound to the session and uploader.
    """
    return BlogService(session, uploader)


BlogServiceDep = Annotated[BlogService, Depends(get_blog_service)]


@dataclass(frozen=True)
class PageQuery:
    """
    Query container for paged listings.

    Parameters
    ----------
    page : int
        1-based page number.
    limit : int
        Page size.
    """

    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE


def get_page_query(
    page: Annotated[int, Query(ge=1, description="Page number, starting at 1")] = 1,
    limit: Annotated[
        int,
        Query(ge=1, le=MAX_PAGE_SIZE, description="Maximum number of records per page"),
    ] = DEFAULT_PAGE_SIZE,
) -> PageQuery:
    return PageQuery(page=page, limit=limit)


PageQueryDep = Annotated[PageQuery, Depends(get_page_query)]
