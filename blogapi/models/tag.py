"""Tag and post/tag association models."""

from typing import cast

from sqlalchemy import Integer
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, SQLModel, String


class TagDB(SQLModel, table=True):
    """A tag name, created the first time a post uses it."""

    __tablename__ = cast("declared_attr[str]", "tags")

    id: int | None = Field(default=None, primary_key=True, description="Tag ID")
    name: str = Field(
        sa_column=Column(String(50), unique=True, nullable=False, index=True),
        description="Tag name (unique, case-sensitive)",
    )


class PostTagDB(SQLModel, table=True):
    """Association between a post and one of its tags."""

    __tablename__ = cast("declared_attr[str]", "post_tags")

    post_id: int = Field(
        sa_column=Column(
            "post_id",
            Integer,
            ForeignKey("posts.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    tag_id: int = Field(
        sa_column=Column(
            "tag_id",
            Integer,
            ForeignKey("tags.id", ondelete="CASCADE"),
            primary_key=True,
            index=True,
        ),
    )
