"""User repository for database operations."""

from app.models.user import UserDB
from app.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserDB]):
    """Repository for User lookups; the authorization gate loads users by id."""

    model = UserDB
