"""Post database model using SQLModel."""

from datetime import UTC, datetime
from typing import cast
from uuid import UUID

from pydantic import ConfigDict
from sqlalchemy import DateTime, Text, Uuid
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, SQLModel, String


class PostDB(SQLModel, table=True):
    """
    Blog post database model.

    Posts are listed by ascending ``id``. Titles are unique across all posts.
    Tags are attached through ``post_tags``.
    """

    __tablename__ = cast("declared_attr[str]", "posts")

    id: int | None = Field(
        default=None,
        primary_key=True,
        description="Post ID",
    )

    owner_id: UUID = Field(
        sa_column=Column(
            "owner_id",
            Uuid,
            ForeignKey("users.uuid", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        description="Owner ID (foreign key to users.uuid)",
    )

    title: str = Field(
        sa_column=Column(String(30), unique=True, nullable=False, index=True),
        description="Post title (unique)",
    )
    text: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Post body",
    )
    category: str = Field(
        sa_column=Column(String(50), nullable=False),
        description="Post category",
    )
    cover_image: str | None = Field(
        default=None,
        sa_column=Column(String(300)),
        description="Stored name of the cover image",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Creation timestamp",
    )
    updated_at: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True)),
        description="Last update timestamp",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "owner_id": "123e4567-e89b-12d3-a456-426614174000",
                "title": "Intro",
                "text": "Hello there",
                "category": "General",
                "cover_image": None,
            },
        },
    )
