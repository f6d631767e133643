"""Recommendation engine: picks a strategy from a profile's history."""

import asyncio
import logging
import math
import random
import time
from enum import Enum

from src.constants import DEFAULT_RECOMMENDATION_LIMIT, DEFAULT_RELATED_LIMIT
from src.models.schemas import ContentItem, InteractionRecord
from src.services.recommendations.candidates import CandidateFinder
from src.services.recommendations.extractor import GenreExtractor
from src.services.recommendations.genres import GenreVocabulary, vocabulary
from src.services.recommendations.ids import LocalId, parse_content_ids
from src.services.recommendations.popularity import PopularityService
from src.services.recommendations.ports import ContentStore, RemoteCatalog
from src.services.recommendations.ranking import ExclusionSet, rank_candidates
from src.services.recommendations.tiers import run_tier
from src.utils.logging import LogContext
from src.utils.metrics import metrics

logger = logging.getLogger(__name__)


class Strategy(str, Enum):
    """Which branch produced a recommendation list."""

    MIXED_POPULAR = "mixed_popular"  # no interaction record yet
    POPULAR_NO_LIKES = "popular_no_likes"
    POPULAR_NO_GENRES = "popular_no_genres"
    POPULAR_NO_CANDIDATES = "popular_no_candidates"
    GENRE_MATCH = "genre_match"
    FALLBACK = "fallback"  # unexpected error


class RecommendationEngine:
    """Personalized recommendations for one profile at a time.

    Strategy:
    1. No interaction record: blend of local and remote popular content
    2. No likes: most popular local content
    3. Likes: derive favored genres, fetch local and remote candidates,
       drop anything already liked or watched, rank by popularity
    4. Any unexpected error: most popular local content

    Every public method returns a list and never raises.
    """

    def __init__(
        self,
        store: ContentStore,
        catalog: RemoteCatalog,
        genres: GenreVocabulary = vocabulary,
        rng: random.Random | None = None,
    ):
        self.store = store
        self.catalog = catalog
        self.popularity = PopularityService(store, catalog, genres, rng)
        self.extractor = GenreExtractor(store, catalog)
        self.finder = CandidateFinder(store, catalog, self.popularity, genres)

    async def get_recommendations(
        self, profile_id: str, limit: int = DEFAULT_RECOMMENDATION_LIMIT
    ) -> list[ContentItem]:
        if limit <= 0:
            return []

        log = LogContext(logger, profile=profile_id)
        start = time.perf_counter()
        try:
            strategy, items = await self._recommend(profile_id, limit, log)
        except Exception as e:
            log.error(f"Recommendation failed, falling back to popular content: {e}", exc_info=True)
            strategy, items = Strategy.FALLBACK, await self.get_popular_content(limit)

        metrics.recommendation_requests_total.inc(strategy=strategy.value)
        metrics.recommendation_duration_seconds.observe(time.perf_counter() - start, strategy=strategy.value)
        log.info(f"Strategy {strategy.value}: {len(items)} items")
        return items[:limit]

    async def _recommend(
        self, profile_id: str, limit: int, log: LogContext
    ) -> tuple[Strategy, list[ContentItem]]:
        record = await self.store.get_interaction_record(profile_id)
        if record is None:
            return Strategy.MIXED_POPULAR, await self.get_mixed_popular_content(limit)

        excluded = await self._exclusions(record, log)

        if not record.liked_content_ids:
            return Strategy.POPULAR_NO_LIKES, await self._popular_excluding(excluded, limit)

        genres = await self.extractor.extract(record)
        if not genres:
            return Strategy.POPULAR_NO_GENRES, await self._popular_excluding(excluded, limit)
        log.info(f"Favored genres: {genres}")

        local_pool, remote_pool = await asyncio.gather(
            self.finder.find_local(genres, math.ceil(limit / 2)),
            self.finder.find_remote(genres, limit * 2),
        )
        log.debug(f"Candidates: {len(local_pool)} local, {len(remote_pool)} remote")

        ranked = rank_candidates(local_pool, remote_pool, excluded, limit)
        if not ranked:
            return Strategy.POPULAR_NO_CANDIDATES, await self._popular_excluding(excluded, limit)
        return Strategy.GENRE_MATCH, ranked

    async def _exclusions(self, record: InteractionRecord, log: LogContext) -> ExclusionSet:
        """Liked and watched ids, widened with the TMDB ids of stored copies."""
        raw_ids = record.excluded_ids
        local_ids = [str(i) for i in parse_content_ids(raw_ids) if isinstance(i, LocalId)]
        if not local_ids:
            return ExclusionSet(raw_ids)

        known = await run_tier("excluded_local_items", lambda: self.store.find_items_by_ids(local_ids), log)
        return ExclusionSet(raw_ids, known.items)

    async def _popular_excluding(self, excluded: ExclusionSet, limit: int) -> list[ContentItem]:
        items = await self.get_popular_content(limit + len(excluded))
        return [item for item in items if not excluded.excludes(item)][:limit]

    async def get_related_content(
        self, content_id: str, limit: int = DEFAULT_RELATED_LIMIT
    ) -> list[ContentItem]:
        """Local items sharing genres with ``content_id`` ("more like this")."""
        if limit <= 0:
            return []

        try:
            source = await self.store.find_item_by_id(content_id)
        except Exception as e:
            logger.warning(f"Related lookup for {content_id} failed: {e}")
            return []
        if source is None:
            return []

        candidates = await self.finder.find_local(source.genre_list, limit + 1)
        return [c.to_item() for c in candidates if c.item.id != source.id][:limit]

    async def get_popular_content(self, limit: int = DEFAULT_RECOMMENDATION_LIMIT) -> list[ContentItem]:
        return await self.popularity.popular(limit)

    async def get_mixed_popular_content(
        self, limit: int = DEFAULT_RECOMMENDATION_LIMIT
    ) -> list[ContentItem]:
        return await self.popularity.mixed(limit)
