"""Collaborator interfaces consumed by the recommendation engine."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum
from typing import Any

from src.models.schemas import ContentItem, InteractionRecord


class SortBy(str, Enum):
    """Remote discovery sort orders."""

    POPULARITY = "popularity.desc"
    RATING = "vote_average.desc"
    RELEASE_DATE = "primary_release_date.desc"


class ContentStore(ABC):
    """Read access to the local content store and interaction records."""

    @abstractmethod
    async def find_items_by_ids(self, ids: Sequence[str]) -> list[ContentItem]:
        """Return the stored items among ``ids`` (unknown ids are skipped)."""

    @abstractmethod
    async def find_items_by_genre_pattern(self, genres: Sequence[str], limit: int) -> list[ContentItem]:
        """Return items whose genre field contains any of ``genres`` (case-insensitive)."""

    @abstractmethod
    async def find_item_by_id(self, content_id: str) -> ContentItem | None:
        """Return one item or None."""

    @abstractmethod
    async def find_most_popular(self, limit: int) -> list[ContentItem]:
        """Return items sorted by likes, then popularity, then recency."""

    @abstractmethod
    async def get_interaction_record(self, profile_id: str) -> InteractionRecord | None:
        """Return the profile's interaction record, or None if it has none yet."""


class RemoteCatalog(ABC):
    """The third-party movie/TV catalogue.

    Every method raises on failure; callers treat a raise as "tier failed".
    Listing methods return raw catalogue items: dicts with at least
    ``id``, ``genre_ids`` and ``popularity``.
    """

    @abstractmethod
    async def get_item_details(self, kind: str, remote_id: int) -> dict[str, Any]:
        """Return details including ``genres`` (list of genre names)."""

    @abstractmethod
    async def discover_by_genres(
        self,
        genre_ids: Sequence[int],
        min_votes: int,
        sort_by: SortBy = SortBy.POPULARITY,
    ) -> list[dict[str, Any]]:
        """Return movies having all of ``genre_ids`` with at least ``min_votes`` votes."""

    @abstractmethod
    async def get_currently_popular(self) -> list[dict[str, Any]]:
        """Return the catalogue's currently popular movies."""
