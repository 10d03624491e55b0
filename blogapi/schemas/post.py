"""
Post schemas.

Request models carry what a client submits through the multipart blog
forms; response models render stored posts with their tag names.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from blogapi.configs.settings import MAX_CATEGORY_LENGTH, MAX_TAG_LENGTH, MAX_TITLE_LENGTH
from blogapi.models.post import PostDB
from blogapi.utils.helpers import normalize_tag_names


class PostFields(BaseModel):
    """Scalar fields of a post."""

    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH, examples=["Intro"])
    text: str = Field(..., min_length=1, examples=["Hello there"])
    category: str = Field(..., min_length=1, max_length=MAX_CATEGORY_LENGTH, examples=["General"])


class PostDraft(PostFields):
    """A complete post submission: scalar fields plus the full tag set."""

    tags: list[str] = Field(default_factory=list, examples=[["go", "infra"]])

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, value: list[str]) -> list[str]:
        names = normalize_tag_names(value)
        if any(len(name) > MAX_TAG_LENGTH for name in names):
            mssg = f"Tag names must be at most {MAX_TAG_LENGTH} characters"
            raise ValueError(mssg)
        return names

    @property
    def fields(self) -> PostFields:
        return PostFields(title=self.title, text=self.text, category=self.category)


class PostResponse(BaseModel):
    """Post as returned by the API."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int
    title: str
    text: str
    category: str
    cover_image: str | None = Field(default=None, serialization_alias="coverImage")
    owner_id: UUID = Field(serialization_alias="ownerId")
    tags: list[str] = Field(default_factory=list)
    created_at: datetime = Field(serialization_alias="createdAt")
    updated_at: datetime | None = Field(default=None, serialization_alias="updatedAt")

    @classmethod
    def from_db(cls, post: PostDB, tags: list[str] | None = None) -> "PostResponse":
        """Build a response from a stored post and its tag names."""
        return cls(
            id=post.id,
            title=post.title,
            text=post.text,
            category=post.category,
            cover_image=post.cover_image,
            owner_id=post.owner_id,
            tags=tags or [],
            created_at=post.created_at,
            updated_at=post.updated_at,
        )
