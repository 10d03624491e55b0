"""Post repository: post records and their tag associations."""

from collections.abc import Iterable
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.auth.identity import Identity
from blogapi.auth.policy import Operation, is_allowed
from blogapi.errors.database import DuplicateEntryError
from blogapi.models.post import PostDB
from blogapi.models.tag import PostTagDB, TagDB
from blogapi.monitoring import get_logger
from blogapi.repositories.base import BaseRepository
from blogapi.repositories.tag import TagRepository
from blogapi.schemas.post import PostFields

logger = get_logger(__name__)

DUPLICATE_TITLE = "A post with this title already exists"


class PostRepository(BaseRepository[PostDB]):
    """
    Repository for Post database operations.

    Keeps each post's tag associations in step with the tag names it is
    written with, and refuses mutations the caller is not entitled to.
    """

    model = PostDB

    def __init__(self, session: AsyncSession, tags: TagRepository | None = None) -> None:
        super().__init__(session)
        self.tags = tags or TagRepository(session)

    async def get_all(self) -> list[PostDB]:
        """
        Get all posts ordered by id ascending.

        Returns:
            list[PostDB]: Every post
        """
        result = await self.session.execute(select(PostDB).order_by(PostDB.id))
        return list(result.scalars().all())

    async def get_by_title(self, title: str) -> PostDB | None:
        """
        Get a post by exact title.

        Args:
            title: Post title

        Returns:
            PostDB | None: Post if found, None otherwise
        """
        return await self.get_by_field("title", title)

    async def list_by_tag(self, tag_name: str) -> list[PostDB]:
        """
        Get the posts carrying a tag.

        An unknown tag is not an error, it simply has no posts.

        Args:
            tag_name: Exact tag name

        Returns:
            list[PostDB]: Matching posts ordered by id ascending
        """
        statement = (
            select(PostDB)
            .join(PostTagDB, PostTagDB.post_id == PostDB.id)
            .join(TagDB, TagDB.id == PostTagDB.tag_id)
            .where(TagDB.name == tag_name)
            .order_by(PostDB.id)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def create(
        self,
        fields: PostFields,
        tag_names: list[str],
        image_ref: str | None,
        owner_id: UUID,
    ) -> PostDB:
        """
        Create a post and associate its tags.

        Args:
            fields: Title, text and category
            tag_names: Tag names to attach, created when unseen
            image_ref: Stored cover image name
            owner_id: Creating user

        Returns:
            PostDB: Created post

        Raises:
            DuplicateEntryError: If a post with the same title exists
        """
        if await self.get_by_title(fields.title) is not None:
            raise DuplicateEntryError(detail=DUPLICATE_TITLE)

        tag_ids = await self.tags.resolve_or_create(tag_names)

        post = PostDB(
            title=fields.title,
            text=fields.text,
            category=fields.category,
            cover_image=image_ref,
            owner_id=owner_id,
        )
        post = await self._add_and_refresh(post, duplicate_detail=DUPLICATE_TITLE)
        await self._attach_tags(post.id, tag_ids.values())

        logger.info(f"Created post {post.id} with {len(tag_ids)} tag(s)")
        return post

    async def update(
        self,
        post_id: int,
        fields: PostFields,
        tag_names: list[str],
        image_ref: str | None,
        identity: Identity,
        *,
        privileged: bool,
    ) -> PostDB | None:
        """
        Replace a post's content and its whole tag set.

        Args:
            post_id: Post to update
            fields: New title, text and category
            tag_names: Complete new tag set
            image_ref: New cover image name, or None to clear it
            identity: Caller performing the update
            privileged: True for the admin path, which skips the owner check
                and leaves ownership unchanged

        Returns:
            PostDB | None: Updated post, or None if it does not exist or the
            caller may not change it
        """
        post = await self._get_mutable(post_id, identity, Operation.UPDATE_OWN_POST, privileged=privileged)
        if post is None:
            return None

        if fields.title != post.title and await self.get_by_title(fields.title) is not None:
            raise DuplicateEntryError(detail=DUPLICATE_TITLE)

        await self.session.execute(delete(PostTagDB).where(PostTagDB.post_id == post_id))
        tag_ids = await self.tags.resolve_or_create(tag_names)
        await self._attach_tags(post_id, tag_ids.values())

        post.title = fields.title
        post.text = fields.text
        post.category = fields.category
        post.cover_image = image_ref
        post.updated_at = datetime.now(tz=UTC)
        if not privileged:
            post.owner_id = identity.user_id

        post = await self._add_and_refresh(post, duplicate_detail=DUPLICATE_TITLE)
        logger.info(f"Updated post {post_id} (privileged={privileged})")
        return post

    async def delete(self, post_id: int, identity: Identity, *, privileged: bool) -> bool:
        """
        Delete a post together with its tag associations.

        Args:
            post_id: Post to delete
            identity: Caller performing the delete
            privileged: True for the admin path, which skips the owner check

        Returns:
            bool: True if deleted, False if missing or not the caller's
        """
        post = await self._get_mutable(post_id, identity, Operation.DELETE_OWN_POST, privileged=privileged)
        if post is None:
            return False

        await self.session.execute(delete(PostTagDB).where(PostTagDB.post_id == post_id))
        await self.session.delete(post)
        await self.session.flush()
        logger.info(f"Deleted post {post_id} (privileged={privileged})")
        return True

    async def _get_mutable(
        self,
        post_id: int,
        identity: Identity,
        operation: Operation,
        *,
        privileged: bool,
    ) -> PostDB | None:
        post = await self.get_by_id(post_id)
        if post is None:
            return None
        if not privileged and not is_allowed(identity, operation, post.owner_id):
            return None
        return post

    async def _attach_tags(self, post_id: int, tag_ids: Iterable[int]) -> None:
        rows = [{"post_id": post_id, "tag_id": tag_id} for tag_id in tag_ids]
        if rows:
            await self.session.execute(insert(PostTagDB).values(rows))
