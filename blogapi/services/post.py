"""
Post service.

Coordinates cover-image uploads with post writes. Each mutation is one
unit of work, and blobs written for a failed mutation are removed again.
"""

from asyncio import gather

from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.auth.identity import Identity
from blogapi.auth.policy import Operation, is_allowed
from blogapi.configs import settings
from blogapi.db.database import atomic
from blogapi.errors import AuthorizationError, DuplicateEntryError, PostNotFoundError
from blogapi.models.post import PostDB
from blogapi.monitoring import get_logger
from blogapi.repositories.post import DUPLICATE_TITLE, PostRepository
from blogapi.schemas.post import PostDraft, PostResponse
from blogapi.services.images import ImageService, ImageUpload

logger = get_logger(__name__)


class PostService:
    """Post use cases, each one a single transaction."""

    def __init__(
        self,
        session: AsyncSession,
        images: ImageService | None = None,
        posts: PostRepository | None = None,
    ) -> None:
        self.session = session
        self.images = images or ImageService()
        self.posts = posts or PostRepository(session)

    async def render(self, posts: list[PostDB]) -> list[PostResponse]:
        """Attach tag names to posts for the API response."""
        names = await self.posts.tags.names_for_posts([post.id for post in posts])
        return [PostResponse.from_db(post, names.get(post.id, [])) for post in posts]

    async def render_one(self, post: PostDB) -> PostResponse:
        return (await self.render([post]))[0]

    async def list_posts(self) -> list[PostResponse]:
        return await self.render(await self.posts.get_all())

    async def get_post(self, post_id: int) -> PostResponse:
        """
        Get one post.

        Raises:
            PostNotFoundError: If the post does not exist
        """
        post = await self.posts.get_by_id(post_id)
        if post is None:
            raise PostNotFoundError
        return await self.render_one(post)

    async def list_by_tag(self, tag_name: str) -> list[PostResponse]:
        return await self.render(await self.posts.list_by_tag(tag_name))

    async def create(
        self,
        draft: PostDraft,
        image: ImageUpload | None,
        identity: Identity,
    ) -> PostResponse:
        """
        Create a post owned by the caller.

        The cover upload and the duplicate-title check run side by side and
        are both awaited before either outcome is acted on.

        Args:
            draft: Submitted post
            image: Optional cover image
            identity: Caller

        Returns:
            PostResponse: Created post

        Raises:
            DuplicateEntryError: If the title is taken
            UploadError: If the cover image is rejected or cannot be stored
        """
        if not is_allowed(identity, Operation.CREATE_POST):
            raise AuthorizationError

        upload_result, existing = await gather(
            self._upload(image),
            self.posts.get_by_title(draft.title),
            return_exceptions=True,
        )
        image_ref = upload_result if isinstance(upload_result, str) else None

        failure: BaseException | None = None
        if isinstance(upload_result, BaseException):
            failure = upload_result
        elif isinstance(existing, BaseException):
            failure = existing
        elif existing is not None:
            failure = DuplicateEntryError(detail=DUPLICATE_TITLE)

        if failure is not None:
            logger.info(f"Post creation rejected: {failure}")
            await self.images.discard(image_ref)
            raise failure

        try:
            async with atomic(self.session):
                post = await self.posts.create(draft.fields, draft.tags, image_ref, identity.user_id)
        except Exception:
            await self.images.discard(image_ref)
            raise

        return await self.render_one(post)

    async def update(
        self,
        post_id: int,
        draft: PostDraft,
        image: ImageUpload | None,
        identity: Identity,
        *,
        privileged: bool,
    ) -> PostResponse:
        """
        Replace a post's content, tags and cover image.

        Args:
            post_id: Post to update
            draft: Complete new content
            image: New cover image, or None to clear the cover
            identity: Caller
            privileged: Use the admin path instead of the owner path

        Returns:
            PostResponse: Updated post

        Raises:
            AuthorizationError: If the admin path is used without the ADMIN role
            PostNotFoundError: If the post is missing or not the caller's
        """
        if privileged and not is_allowed(identity, Operation.UPDATE_ANY_POST):
            raise AuthorizationError

        upload_result, current = await gather(
            self._upload(image),
            self.posts.get_by_id(post_id),
            return_exceptions=True,
        )
        image_ref = upload_result if isinstance(upload_result, str) else None

        if isinstance(upload_result, BaseException) or isinstance(current, BaseException):
            await self.images.discard(image_ref)
            raise upload_result if isinstance(upload_result, BaseException) else current
        previous_cover = current.cover_image if current is not None else None

        try:
            async with atomic(self.session):
                post = await self.posts.update(
                    post_id,
                    draft.fields,
                    draft.tags,
                    image_ref,
                    identity,
                    privileged=privileged,
                )
                if post is None:
                    raise PostNotFoundError
                await self._prune_tags()
        except Exception:
            await self.images.discard(image_ref)
            raise

        if previous_cover and previous_cover != image_ref:
            await self.images.discard(previous_cover)
        return await self.render_one(post)

    async def delete(self, post_id: int, identity: Identity, *, privileged: bool) -> None:
        """
        Delete a post and its tag associations.

        Raises:
            AuthorizationError: If the admin path is used without the ADMIN role
            PostNotFoundError: If the post is missing or not the caller's
        """
        if privileged and not is_allowed(identity, Operation.DELETE_ANY_POST):
            raise AuthorizationError

        async with atomic(self.session):
            post = await self.posts.get_by_id(post_id)
            cover = post.cover_image if post is not None else None
            if not await self.posts.delete(post_id, identity, privileged=privileged):
                raise PostNotFoundError
            await self._prune_tags()

        await self.images.discard(cover)

    async def _upload(self, image: ImageUpload | None) -> str | None:
        if image is None:
            return None
        return await self.images.store(image)

    async def _prune_tags(self) -> None:
        if settings.PRUNE_ORPHAN_TAGS:
            await self.posts.tags.prune_orphans()
