"""Tag registry: resolves tag names to ids, creating unseen names."""

from collections import defaultdict
from collections.abc import Collection, Iterable
from typing import Any

from sqlalchemy import delete, exists, insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from blogapi.models.tag import PostTagDB, TagDB
from blogapi.monitoring import get_logger
from blogapi.repositories.base import BaseRepository

logger = get_logger(__name__)

CONFLICT_SAFE_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


class TagRepository(BaseRepository[TagDB]):
    """
    Repository for Tag records.

    Tags are created lazily the first time a post uses a name and are
    matched by exact, case-sensitive name.
    """

    model = TagDB

    async def get_by_name(self, name: str) -> TagDB | None:
        """
        Get a tag by its exact name.

        Args:
            name: Tag name

        Returns:
            TagDB | None: Tag if found, None otherwise
        """
        return await self.get_by_field("name", name)

    async def resolve_or_create(self, names: Iterable[str]) -> dict[str, int]:
        """
        Map tag names to ids, creating the names that do not exist yet.

        Concurrent callers creating the same new name converge on one row:
        the insert skips names that already exist and the ids are read back
        afterwards.

        Args:
            names: Tag names to resolve

        Returns:
            dict[str, int]: Tag id for every requested name
        """
        wanted = set(names)
        if not wanted:
            return {}

        resolved = await self._ids_for(wanted)
        missing = wanted - resolved.keys()
        if missing:
            await self._insert_missing(sorted(missing))
            resolved = await self._ids_for(wanted)
            logger.info(f"Created {len(missing)} new tag(s)")
        return resolved

    async def names_for_posts(self, post_ids: Collection[int]) -> dict[int, list[str]]:
        """
        Collect tag names for a batch of posts.

        Args:
            post_ids: Post ids to look up

        Returns:
            dict[int, list[str]]: Sorted tag names per post id
        """
        if not post_ids:
            return {}
        statement = (
            select(PostTagDB.post_id, TagDB.name)
            .join(TagDB, TagDB.id == PostTagDB.tag_id)
            .where(PostTagDB.post_id.in_(post_ids))
            .order_by(TagDB.name)
        )
        result = await self.session.execute(statement)
        names: dict[int, list[str]] = defaultdict(list)
        for post_id, name in result.all():
            names[post_id].append(name)
        return dict(names)

    async def prune_orphans(self) -> int:
        """
        Delete tags no post refers to.

        Returns:
            int: Number of tags removed
        """
        in_use = exists().where(PostTagDB.tag_id == TagDB.id)
        result = await self.session.execute(delete(TagDB).where(~in_use))
        removed = result.rowcount or 0
        if removed:
            logger.info(f"Pruned {removed} orphan tag(s)")
        return removed

    async def _ids_for(self, names: Collection[str]) -> dict[str, int]:
        statement = select(TagDB.name, TagDB.id).where(TagDB.name.in_(names))
        result = await self.session.execute(statement)
        return {name: tag_id for name, tag_id in result.all()}

    async def _insert_missing(self, names: list[str]) -> None:
        rows: list[dict[str, Any]] = [{"name": name} for name in names]
        dialect = self.session.get_bind().dialect.name
        if conflict_safe_insert := CONFLICT_SAFE_INSERTS.get(dialect):
            statement = conflict_safe_insert(TagDB).values(rows).on_conflict_do_nothing(
                index_elements=["name"],
            )
        else:
            statement = insert(TagDB).values(rows)
        await self.session.execute(statement)
