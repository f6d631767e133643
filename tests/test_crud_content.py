"""Tests for the SQL content repository and interaction tracking."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from src.constants import MAX_ACTIVITY_LOG, MAX_SEARCH_HISTORY
from src.db.crud import (
    ContentRepository,
    get_activity_log,
    get_interaction,
    get_search_history,
    record_search,
    toggle_like,
    update_watch_progress,
)
from src.models.content import Content
from tests.fakes import local_id


class TestContentRepository:
    """Tests for ContentRepository reads."""

    @pytest.mark.asyncio
    async def test_find_items_by_ids(self, db_session: AsyncSession, catalogue: list[Content]):
        """Test that known ids are returned and unknown ones skipped."""
        repo = ContentRepository(db_session)

        items = await repo.find_items_by_ids([local_id(1), local_id(3), local_id(99)])

        assert {i.id for i in items} == {local_id(1), local_id(3)}
        assert all(i.source == "local" for i in items)

    @pytest.mark.asyncio
    async def test_find_items_by_genre_pattern(self, db_session: AsyncSession, catalogue: list[Content]):
        """Test case-insensitive genre matching ordered by popularity."""
        repo = ContentRepository(db_session)

        items = await repo.find_items_by_genre_pattern(["ACTION"], 10)

        assert [i.id for i in items] == [local_id(4), local_id(1), local_id(6)]

    @pytest.mark.asyncio
    async def test_genre_pattern_alternation_and_limit(self, db_session: AsyncSession, catalogue: list[Content]):
        """Test that any listed genre matches and the limit applies."""
        repo = ContentRepository(db_session)

        items = await repo.find_items_by_genre_pattern(["Comedy", "Horror"], 1)

        assert [i.id for i in items] == [local_id(2)]

    @pytest.mark.asyncio
    async def test_genre_pattern_escapes_wildcards(self, db_session: AsyncSession, catalogue: list[Content]):
        """Test that LIKE wildcards in genre names match literally."""
        repo = ContentRepository(db_session)

        assert await repo.find_items_by_genre_pattern(["%"], 10) == []
        assert await repo.find_items_by_genre_pattern(["_"], 10) == []

    @pytest.mark.asyncio
    async def test_find_most_popular(self, db_session: AsyncSession, catalogue: list[Content]):
        """Test ordering by likes, then popularity."""
        repo = ContentRepository(db_session)

        items = await repo.find_most_popular(3)

        assert [i.id for i in items] == [local_id(2), local_id(4), local_id(1)]

    @pytest.mark.asyncio
    async def test_find_item_by_id(self, db_session: AsyncSession, catalogue: list[Content]):
        """Test single lookups."""
        repo = ContentRepository(db_session)

        item = await repo.find_item_by_id(local_id(5))

        assert item is not None
        assert item.title == "Chernobyl"
        assert item.tmdb_id == 87108
        assert await repo.find_item_by_id(local_id(99)) is None

    @pytest.mark.asyncio
    async def test_search(self, db_session: AsyncSession, catalogue: list[Content]):
        """Test search across title, description and genre."""
        repo = ContentRepository(db_session)

        assert [i.title for i in await repo.search("space")] == ["Alien"]
        assert [i.title for i in await repo.search("die")] == ["Die Hard"]
        assert {i.title for i in await repo.search("comedy")} == {"Airplane!"}

    @pytest.mark.asyncio
    async def test_no_interaction_record(self, db_session: AsyncSession):
        """Test that a profile without activity has no record."""
        assert await ContentRepository(db_session).get_interaction_record("nobody") is None


class TestInteractions:
    """Tests for like, progress and search tracking."""

    @pytest.mark.asyncio
    async def test_like_and_unlike_local_item(self, db_session: AsyncSession, catalogue: list[Content]):
        """Test that likes are recorded once and adjust the item counter."""
        liked, total = await toggle_like(db_session, "p1", local_id(3), True)
        assert (liked, total) == (True, 6)

        liked, total = await toggle_like(db_session, "p1", local_id(3), True)
        assert (liked, total) == (True, 6)

        liked, total = await toggle_like(db_session, "p1", local_id(3), False)
        assert (liked, total) == (False, 5)

        record = await ContentRepository(db_session).get_interaction_record("p1")
        assert record is not None
        assert record.liked_content_ids == []

    @pytest.mark.asyncio
    async def test_like_remote_item(self, db_session: AsyncSession):
        """Test that remote ids are recorded without a like counter."""
        liked, total = await toggle_like(db_session, "p1", "movie_603", True)

        assert (liked, total) == (True, None)
        record = await ContentRepository(db_session).get_interaction_record("p1")
        assert record.liked_content_ids == ["movie_603"]

    @pytest.mark.asyncio
    async def test_watch_progress_clamped(self, db_session: AsyncSession):
        """Test that progress is stored within 0-100."""
        assert await update_watch_progress(db_session, "p1", "tv_1399", 150) == 100.0
        assert await update_watch_progress(db_session, "p1", "movie_1", -5) == 0.0

        record = await ContentRepository(db_session).get_interaction_record("p1")
        assert record.watch_progress == {"tv_1399": 100.0, "movie_1": 0.0}
        assert record.excluded_ids == {"tv_1399", "movie_1"}

    @pytest.mark.asyncio
    async def test_search_history_most_recent_first_and_capped(self, db_session: AsyncSession):
        """Test that search history keeps the latest entries only."""
        for n in range(MAX_SEARCH_HISTORY + 5):
            await record_search(db_session, "p1", f"query {n}", n)

        record = await ContentRepository(db_session).get_interaction_record("p1")
        assert len(record.search_history) == MAX_SEARCH_HISTORY
        assert record.search_history[0].query == f"query {MAX_SEARCH_HISTORY + 4}"

    @pytest.mark.asyncio
    async def test_activity_log_capped(self, db_session: AsyncSession):
        """Test that the activity log is bounded."""
        for n in range(MAX_ACTIVITY_LOG + 10):
            await update_watch_progress(db_session, "p1", f"movie_{n}", 50)

        interaction = await get_interaction(db_session, "p1")
        assert len(interaction.activity_log) == MAX_ACTIVITY_LOG
        assert interaction.activity_log[0]["content_id"] == f"movie_{MAX_ACTIVITY_LOG + 9}"

    @pytest.mark.asyncio
    async def test_history_readers(self, db_session: AsyncSession):
        """Test that readers return the newest entries up to the limit."""
        await toggle_like(db_session, "p1", "movie_603", True)
        await record_search(db_session, "p1", "heist", 2)
        await record_search(db_session, "p1", "space", 1)

        searches = await get_search_history(db_session, "p1", 1)
        activity = await get_activity_log(db_session, "p1", 10)

        assert [s["query"] for s in searches] == ["space"]
        assert [a["action"] for a in activity] == ["search", "search", "like"]
        assert await get_activity_log(db_session, "nobody", 10) == []
