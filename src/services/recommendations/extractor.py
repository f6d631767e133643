"""Favored-genre extraction from a profile's interaction history."""

import asyncio
import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass, field

from src.constants import (
    DEFAULT_FAVORITE_GENRES,
    MAX_FAVORITE_GENRES,
    MAX_REMOTE_GENRE_LOOKUPS,
    REMOTE_LOOKUP_CONCURRENCY,
)
from src.models.schemas import InteractionRecord, SearchEntry
from src.services.recommendations.genres import genres_in_query
from src.services.recommendations.ids import LocalId, RemoteId, parse_content_ids
from src.services.recommendations.ports import ContentStore, RemoteCatalog
from src.services.recommendations.tiers import TierResult, run_tier

logger = logging.getLogger(__name__)


@dataclass
class GenreVotes:
    """Genre signal gathered for one extraction, by source."""

    local: Counter = field(default_factory=Counter)  # genre -> liked local items carrying it
    remote: dict[str, None] = field(default_factory=dict)  # ordered set
    search: Counter = field(default_factory=Counter)  # genre -> matching queries

    def ranked(self, limit: int = MAX_FAVORITE_GENRES) -> list[str]:
        """Merge the three sources into one ordered genre list.

        Order: local vote count desc, then presence in remote likes, then
        search vote count desc; remaining ties keep first-seen order
        (local, then remote, then search).
        """
        seen: dict[str, None] = {}
        for name in (*self.local, *self.remote, *self.search):
            seen.setdefault(name, None)

        ordered = sorted(
            seen,
            key=lambda g: (-self.local[g], 0 if g in self.remote else 1, -self.search[g]),
        )
        return ordered[:limit]


class GenreExtractor:
    """Derives up to five favored genres from likes and searches.

    Three independent sources are combined: genres of liked local items
    (weighted by how many liked items carry them), genres of liked remote
    items (looked up in the remote catalogue, presence only) and genres
    implied by search queries.
    """

    def __init__(
        self,
        store: ContentStore,
        catalog: RemoteCatalog,
        max_genres: int = MAX_FAVORITE_GENRES,
        max_remote_lookups: int = MAX_REMOTE_GENRE_LOOKUPS,
        lookup_concurrency: int = REMOTE_LOOKUP_CONCURRENCY,
    ):
        self.store = store
        self.catalog = catalog
        self.max_genres = max_genres
        self.max_remote_lookups = max_remote_lookups
        self.lookup_concurrency = lookup_concurrency

    async def extract(self, record: InteractionRecord) -> list[str]:
        """Return the profile's favored genres, best first (possibly empty)."""
        votes = await self.collect_votes(record)
        genres = votes.ranked(self.max_genres)
        logger.debug(
            f"Genres for {record.profile_id}: local={dict(votes.local)} "
            f"remote={list(votes.remote)} search={dict(votes.search)} -> {genres}"
        )
        return genres

    async def collect_votes(self, record: InteractionRecord) -> GenreVotes:
        liked = parse_content_ids(record.liked_content_ids)
        local_ids = [i for i in liked if isinstance(i, LocalId)]
        remote_ids = [i for i in liked if isinstance(i, RemoteId)][: self.max_remote_lookups]

        local_votes, remote_genres = await asyncio.gather(
            self._local_votes(local_ids),
            self._remote_genres(remote_ids),
        )
        return GenreVotes(
            local=local_votes,
            remote=dict.fromkeys(remote_genres),
            search=self._search_votes(record.search_history),
        )

    async def _local_votes(self, local_ids: Sequence[LocalId]) -> Counter:
        votes: Counter = Counter()
        if not local_ids:
            return votes

        result = await run_tier(
            "liked_local_items",
            lambda: self.store.find_items_by_ids([str(i) for i in local_ids]),
            logger,
        )
        for item in result.items:
            votes.update(dict.fromkeys(item.genre_list, 1))
        return votes

    async def _remote_genres(self, remote_ids: Sequence[RemoteId]) -> list[str]:
        if not remote_ids:
            return []

        semaphore = asyncio.Semaphore(self.lookup_concurrency)

        async def lookup(remote_id: RemoteId) -> TierResult[str]:
            async with semaphore:
                return await run_tier(
                    "remote_item_genres",
                    lambda: self._genres_of(remote_id),
                    logger,
                )

        results = await asyncio.gather(*(lookup(r) for r in remote_ids))
        if not any(r.ok for r in results):
            logger.info(
                f"All {len(remote_ids)} remote genre lookups failed, "
                f"using default genres {DEFAULT_FAVORITE_GENRES}"
            )
            return list(DEFAULT_FAVORITE_GENRES)

        genres: dict[str, None] = {}
        for result in results:
            for name in result.items:
                genres.setdefault(name, None)
        return list(genres)

    async def _genres_of(self, remote_id: RemoteId) -> list[str]:
        details = await self.catalog.get_item_details(remote_id.kind, remote_id.remote_id)
        return [g.strip() for g in details.get("genres", []) if g and g.strip()]

    def _search_votes(self, history: Sequence[SearchEntry]) -> Counter:
        votes: Counter = Counter()
        for entry in history:
            votes.update(genres_in_query(entry.query))
        return votes
