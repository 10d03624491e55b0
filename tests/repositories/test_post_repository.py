"""Tests for the post repository."""

from collections.abc import Callable

import pytest
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from blogapi.auth import Identity, Role
from blogapi.errors import DuplicateEntryError
from blogapi.models import PostTagDB, UserDB
from blogapi.repositories import PostRepository
from blogapi.schemas import PostFields


def fields(title: str = "Intro", text: str = "Hello there", category: str = "General") -> PostFields:
    return PostFields(title=title, text=text, category=category)


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_attaches_tags(self, session: AsyncSession, alice: UserDB) -> None:
        posts = PostRepository(session)

        post = await posts.create(fields(), ["go", "infra"], None, alice.uuid)

        assert post.id is not None
        assert post.owner_id == alice.uuid
        names = await posts.tags.names_for_posts([post.id])
        assert names[post.id] == ["go", "infra"]

    @pytest.mark.asyncio
    async def test_duplicate_title(self, session: AsyncSession, alice: UserDB, bob: UserDB) -> None:
        posts = PostRepository(session)
        await posts.create(fields(), [], None, alice.uuid)

        with pytest.raises(DuplicateEntryError):
            await posts.create(fields(text="other"), ["rust"], None, bob.uuid)

        assert await posts.tags.get_by_name("rust") is None

    @pytest.mark.asyncio
    async def test_listing_is_ordered_by_id(self, session: AsyncSession, alice: UserDB) -> None:
        posts = PostRepository(session)
        for title in ("C", "A", "B"):
            await posts.create(fields(title=title), [], None, alice.uuid)

        listed = await posts.get_all()

        assert [post.title for post in listed] == ["C", "A", "B"]
        assert [post.id for post in listed] == sorted(post.id for post in listed)

    @pytest.mark.asyncio
    async def test_list_by_tag(self, session: AsyncSession, alice: UserDB) -> None:
        posts = PostRepository(session)
        tagged = await posts.create(fields(title="Tagged"), ["go"], None, alice.uuid)
        await posts.create(fields(title="Other"), ["rust"], None, alice.uuid)

        assert [post.id for post in await posts.list_by_tag("go")] == [tagged.id]
        assert await posts.list_by_tag("Go") == []
        assert await posts.list_by_tag("missing") == []


class TestMutations:
    @pytest.mark.asyncio
    async def test_update_replaces_tag_set(
        self,
        session: AsyncSession,
        alice: UserDB,
        identity_for: Callable[..., Identity],
    ) -> None:
        posts = PostRepository(session)
        post = await posts.create(fields(), ["go", "infra"], None, alice.uuid)

        updated = await posts.update(
            post.id,
            fields(text="Edited"),
            ["infra", "ops"],
            None,
            identity_for(alice),
            privileged=False,
        )

        assert updated is not None
        assert updated.text == "Edited"
        assert updated.updated_at is not None
        assert (await posts.tags.names_for_posts([post.id]))[post.id] == ["infra", "ops"]

    @pytest.mark.asyncio
    async def test_update_by_non_owner_changes_nothing(
        self,
        session: AsyncSession,
        alice: UserDB,
        bob: UserDB,
        identity_for: Callable[..., Identity],
    ) -> None:
        posts = PostRepository(session)
        post = await posts.create(fields(), ["go"], None, alice.uuid)

        result = await posts.update(
            post.id,
            fields(text="Hijacked"),
            [],
            None,
            identity_for(bob),
            privileged=False,
        )

        assert result is None
        stored = await posts.get_by_id(post.id)
        assert stored is not None
        assert stored.text == "Hello there"
        assert (await posts.tags.names_for_posts([post.id]))[post.id] == ["go"]

    @pytest.mark.asyncio
    async def test_privileged_update_keeps_owner(
        self,
        session: AsyncSession,
        alice: UserDB,
        admin_user: UserDB,
        identity_for: Callable[..., Identity],
    ) -> None:
        posts = PostRepository(session)
        post = await posts.create(fields(), [], None, alice.uuid)

        updated = await posts.update(
            post.id,
            fields(text="Moderated"),
            [],
            None,
            identity_for(admin_user, Role.USER, Role.ADMIN),
            privileged=True,
        )

        assert updated is not None
        assert updated.owner_id == alice.uuid
        assert updated.text == "Moderated"

    @pytest.mark.asyncio
    async def test_update_to_taken_title(
        self,
        session: AsyncSession,
        alice: UserDB,
        identity_for: Callable[..., Identity],
    ) -> None:
        posts = PostRepository(session)
        await posts.create(fields(title="First"), [], None, alice.uuid)
        second = await posts.create(fields(title="Second"), [], None, alice.uuid)

        with pytest.raises(DuplicateEntryError):
            await posts.update(
                second.id,
                fields(title="First"),
                [],
                None,
                identity_for(alice),
                privileged=False,
            )

    @pytest.mark.asyncio
    async def test_update_keeping_own_title(
        self,
        session: AsyncSession,
        alice: UserDB,
        identity_for: Callable[..., Identity],
    ) -> None:
        posts = PostRepository(session)
        post = await posts.create(fields(), [], None, alice.uuid)

        updated = await posts.update(post.id, fields(), [], None, identity_for(alice), privileged=False)

        assert updated is not None
        assert updated.title == "Intro"

    @pytest.mark.asyncio
    async def test_delete_removes_associations(
        self,
        session: AsyncSession,
        alice: UserDB,
        identity_for: Callable[..., Identity],
    ) -> None:
        posts = PostRepository(session)
        post = await posts.create(fields(), ["go", "infra"], None, alice.uuid)

        assert await posts.delete(post.id, identity_for(alice), privileged=False)

        assert await posts.get_by_id(post.id) is None
        links = (await session.exec(select(PostTagDB).where(PostTagDB.post_id == post.id))).all()
        assert links == []
        assert await posts.tags.get_by_name("go") is not None

    @pytest.mark.asyncio
    async def test_delete_by_non_owner(
        self,
        session: AsyncSession,
        alice: UserDB,
        bob: UserDB,
        identity_for: Callable[..., Identity],
    ) -> None:
        posts = PostRepository(session)
        post = await posts.create(fields(), [], None, alice.uuid)

        assert not await posts.delete(post.id, identity_for(bob), privileged=False)
        assert await posts.get_by_id(post.id) is not None

    @pytest.mark.asyncio
    async def test_delete_missing(
        self,
        session: AsyncSession,
        alice: UserDB,
        identity_for: Callable[..., Identity],
    ) -> None:
        assert not await PostRepository(session).delete(999, identity_for(alice), privileged=True)
