"""Repository layer for database operations."""

from app.repositories.blog import BlogRecord, BlogRepository
from app.repositories.category import CategoryRepository
from app.repositories.user import UserRepository

__all__ = ["BlogRecord", "BlogRepository", "CategoryRepository", "UserRepository"]
