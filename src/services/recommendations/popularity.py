"""Popularity-based content: the leaf fallback of every recommendation path."""

import logging
import math
import random

from src.models.schemas import ContentItem
from src.services.recommendations.genres import GenreVocabulary, vocabulary
from src.services.recommendations.ids import identity_keys
from src.services.recommendations.ports import ContentStore, RemoteCatalog
from src.services.recommendations.remote_items import to_content_item
from src.services.recommendations.tiers import run_tier

logger = logging.getLogger(__name__)


class PopularityService:
    """Most-liked local content, optionally blended with remote popular items."""

    def __init__(
        self,
        store: ContentStore,
        catalog: RemoteCatalog,
        genres: GenreVocabulary = vocabulary,
        rng: random.Random | None = None,
    ):
        self.store = store
        self.catalog = catalog
        self.genres = genres
        self.rng = rng or random.Random()

    async def popular(self, limit: int) -> list[ContentItem]:
        """Local items by likes, popularity, recency. Never raises."""
        if limit <= 0:
            return []
        result = await run_tier("popular_local", lambda: self.store.find_most_popular(limit), logger)
        return result.items[:limit]

    async def mixed(self, limit: int) -> list[ContentItem]:
        """Roughly half local popular, half remote popular, shuffled.

        A failing remote catalogue leaves the local half only; local items
        fill any slots the remote side cannot.
        """
        if limit <= 0:
            return []

        local = await self.popular(limit)
        remote_result = await run_tier("popular_remote", self.catalog.get_currently_popular, logger)

        local_keys = set().union(*(identity_keys(item) for item in local)) if local else set()
        remote: list[ContentItem] = []
        for raw in remote_result.items:
            item = to_content_item(raw, self.genres)
            if not identity_keys(item) & local_keys:
                remote.append(item)

        remote_share = min(len(remote), limit - math.ceil(limit / 2))
        blended = remote[:remote_share] + local[: limit - remote_share]
        self.rng.shuffle(blended)
        logger.debug(f"Mixed popular: {remote_share} remote + {len(blended) - remote_share} local")
        return blended[:limit]
