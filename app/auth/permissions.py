"""Role-based access control (RBAC) permissions and dependencies."""

from collections.abc import Awaitable, Callable
from typing import Annotated

from fastapi import Depends, HTTPException
from starlette.status import HTTP_403_FORBIDDEN

from app.dependencies.dependencies import get_current_user
from app.models import UserDB

# Define role hierarchy (higher index = more permissions)
ROLE_HIERARCHY = {
    "author": 0,
    "admin": 1,
}


def has_role_or_higher(user_role: str, required_role: str) -> bool:
    """
    Check if user has the required role or higher.

    Unknown roles never qualify.

    Args:
        user_role: User's current role
        required_role: Required role for access

    Returns:
        bool: True if user has required role or higher
    """
    if user_role not in ROLE_HIERARCHY:
        return False
    return ROLE_HIERARCHY[user_role] >= ROLE_HIERARCHY[required_role]


def require_role_or_higher(required_role: str) -> Callable[..., Awaitable[UserDB]]:
    """
    Create a dependency that requires a role or higher in hierarchy.

    Args:
        required_role: Minimum required role

    Returns:
        Callable: Dependency function
    """

    async def role_checker(
        user: Annotated[UserDB, Depends(get_current_user)],
    ) -> UserDB:
        if not has_role_or_higher(user.role, required_role):
            raise HTTPException(
                status_code=HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required role: {required_role} or higher",
            )
        return user

    return role_checker


async def require_admin(
    user: Annotated[UserDB, Depends(get_current_user)],
) -> UserDB:
    """
    Dependency that requires admin role.

    Parameters
    ----------
    user : UserDB
        Current authenticated user.

    Returns
    -------
    UserDB
        The user if they have admin role.

    Raises
    ------
    HTTPException
        If user is not an admin.
    """
    if user.role != "admin":
        raise HTTPException(
            status_code=HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user


require_author_or_admin = require_role_or_higher("author")

# Type aliases for common dependencies
AdminUserDep = Annotated[UserDB, Depends(require_admin)]
AuthorUserDep = Annotated[UserDB, Depends(require_author_or_admin)]
