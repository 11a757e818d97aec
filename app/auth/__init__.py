"""Authentication and authorization module."""

from app.auth.permissions import (
    AdminUserDep,
    AuthorUserDep,
    has_role_or_higher,
    require_admin,
    require_author_or_admin,
    require_role_or_higher,
)

__all__ = [
    "AdminUserDep",
    "AuthorUserDep",
    "has_role_or_higher",
    "require_admin",
    "require_author_or_admin",
    "require_role_or_higher",
]
