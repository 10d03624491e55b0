"""Repositories for database operations."""

from blogapi.repositories.post import PostRepository
from blogapi.repositories.tag import TagRepository
from blogapi.repositories.user import UserRepository

__all__ = ["PostRepository", "TagRepository", "UserRepository"]
