"""Database models for the application."""

from blogapi.models.post import PostDB
from blogapi.models.tag import PostTagDB, TagDB
from blogapi.models.user import UserDB, UserRoleDB

__all__ = ["PostDB", "PostTagDB", "TagDB", "UserDB", "UserRoleDB"]
