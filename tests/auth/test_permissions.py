"""Tests for RBAC permissions and dependencies."""

import pytest
from fastapi import HTTPException

from app.auth import has_role_or_higher, require_admin, require_author_or_admin
from app.auth.permissions import ROLE_HIERARCHY
from app.models import UserDB


def make_user(role: str) -> UserDB:
    return UserDB(name="Someone", email=f"{role}@example.com", role=role)


class TestRoleHierarchy:
    """Test cases for role hierarchy."""

    def test_hierarchy_order_is_correct(self) -> None:
        """Test that hierarchy order is author < admin."""
        assert ROLE_HIERARCHY["author"] < ROLE_HIERARCHY["admin"]


class TestHasRoleOrHigher:
    """Test cases for has_role_or_higher function."""

    def test_author_has_author_role(self) -> None:
        assert has_role_or_higher("author", "author") is True

    def test_author_does_not_have_admin(self) -> None:
        assert has_role_or_higher("author", "admin") is False

    def test_admin_has_all_roles(self) -> None:
        assert has_role_or_higher("admin", "author") is True
        assert has_role_or_higher("admin", "admin") is True

    def test_unknown_role_never_qualifies(self) -> None:
        """Test that roles outside the hierarchy are refused."""
        assert has_role_or_higher("reader", "author") is False
        assert has_role_or_higher("", "author") is False


class TestRoleDependencies:
    """Test cases for the role-checking dependencies."""

    @pytest.mark.asyncio
    async def test_admin_passes_admin_gate(self) -> None:
        user = make_user("admin")
        assert await require_admin(user) is user

    @pytest.mark.asyncio
    async def test_author_refused_by_admin_gate(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await require_admin(make_user("author"))

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail == "Admin access required"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", ["author", "admin"])
    async def test_author_gate_allows_both_roles(self, role: str) -> None:
        user = make_user(role)
        assert await require_author_or_admin(user) is user

    @pytest.mark.asyncio
    async def test_author_gate_refuses_unknown_role(self) -> None:
        with pytest.raises(HTTPException) as exc_info:
            await require_author_or_admin(make_user("reader"))
        assert exc_info.value.status_code == 403
