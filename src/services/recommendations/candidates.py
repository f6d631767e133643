"""Candidate retrieval from the local store and the remote catalogue."""

import logging
from collections.abc import Sequence
from typing import Any

from src.constants import MIN_VOTES_BROAD, MIN_VOTES_STRICT
from src.models.schemas import ContentItem
from src.services.recommendations.genres import GenreVocabulary, vocabulary
from src.services.recommendations.popularity import PopularityService
from src.services.recommendations.ports import ContentStore, RemoteCatalog, SortBy
from src.services.recommendations.ranking import ScoredCandidate, score_item, sort_by_match
from src.services.recommendations.remote_items import to_content_item
from src.services.recommendations.tiers import TierResult, run_tier

logger = logging.getLogger(__name__)


class CandidateFinder:
    """Builds the local and remote candidate pools for a list of favored genres."""

    def __init__(
        self,
        store: ContentStore,
        catalog: RemoteCatalog,
        popularity: PopularityService,
        genres: GenreVocabulary = vocabulary,
    ):
        self.store = store
        self.catalog = catalog
        self.popularity = popularity
        self.genres = genres

    async def find_local(self, favorite_genres: Sequence[str], limit: int) -> list[ScoredCandidate]:
        """Local items matching any favored genre, best match first.

        Over-fetches ``2 * limit`` so genre-match ordering can promote items
        the store ranked lower by popularity.
        """
        if limit <= 0:
            return []
        if not favorite_genres:
            return [ScoredCandidate(item, 0, 0.0) for item in await self.popularity.popular(limit)]

        result = await run_tier(
            "local_genre_match",
            lambda: self.store.find_items_by_genre_pattern(favorite_genres, limit * 2),
            logger,
        )
        scored = sort_by_match(score_item(item, favorite_genres) for item in result.items)
        return scored[:limit]

    async def find_remote(self, favorite_genres: Sequence[str], limit: int) -> list[ContentItem]:
        """Remote items for the favored genres, broadening until ``limit`` is reached.

        Tiers, in order: every genre combined with a strict vote threshold,
        the primary genre alone with a lower threshold, then whatever is
        currently popular. Failed tiers are skipped.
        """
        genre_ids = self.genres.ids_for(favorite_genres)
        if limit <= 0 or not genre_ids:
            return []

        tiers = [
            ("discover_all_genres", lambda: self.catalog.discover_by_genres(genre_ids, MIN_VOTES_STRICT, SortBy.POPULARITY)),
            ("discover_primary_genre", lambda: self.catalog.discover_by_genres(genre_ids[:1], MIN_VOTES_BROAD, SortBy.POPULARITY)),
            ("currently_popular", self.catalog.get_currently_popular),
        ]

        pool: dict[int, dict[str, Any]] = {}
        outcomes: list[TierResult[dict[str, Any]]] = []
        for tier, call in tiers:
            if len(pool) >= limit:
                break
            outcome = await run_tier(tier, call, logger)
            outcomes.append(outcome)
            for raw in outcome.items:
                remote_id = raw.get("id")
                if remote_id is not None:
                    pool.setdefault(int(remote_id), raw)

        logger.debug(
            "Remote pool: "
            + ", ".join(f"{o.tier}={'ok' if o.ok else 'failed'}/{len(o.items)}" for o in outcomes)
            + f" -> {len(pool)} unique"
        )
        return [to_content_item(raw, self.genres) for raw in list(pool.values())[:limit]]
