"""TMDB API integration: the remote movie/TV catalogue."""

import logging
import time
from collections.abc import Callable, Sequence
from typing import Any

import httpx

from src.config import get_settings
from src.constants import TMDB_API_BASE_URL, TMDB_MEDIA_TYPE_MOVIE, TMDB_MEDIA_TYPE_TV
from src.services.recommendations.ports import RemoteCatalog, SortBy
from src.utils.cache import CACHE_TTL_MEDIUM, CACHE_TTL_SHORT, cached
from src.utils.http_client import get_tmdb_client
from src.utils.metrics import metrics
from src.utils.rate_limiter import RateLimiter
from src.utils.retry import DEFAULT_RETRY_CONFIG, RetryConfig, retry_async

logger = logging.getLogger(__name__)
settings = get_settings()


class RemoteCatalogError(Exception):
    """TMDB could not answer a request."""


class TMDBService(RemoteCatalog):
    """Service for reading movie and TV data from TMDB.

    Every method raises RemoteCatalogError on failure; callers decide how
    to degrade. Listing methods return raw result dicts tagged with their
    media ``kind``.
    """

    def __init__(
        self,
        api_key: str | None = None,
        language: str | None = None,
        rate_limiter: RateLimiter | None = None,
        retry_config: RetryConfig = DEFAULT_RETRY_CONFIG,
        client_factory: Callable[[], httpx.AsyncClient] = get_tmdb_client,
    ) -> None:
        self.api_key = settings.tmdb_api_key if api_key is None else api_key
        self.language = language or settings.tmdb_language
        self.rate_limiter = rate_limiter or RateLimiter()
        self.retry_config = retry_config
        self.client_factory = client_factory
        # Support both API key v3 and Bearer token
        if self.api_key.startswith("eyJ"):
            # Bearer token (API Read Access Token)
            self.headers = {
                "Authorization": f"Bearer {self.api_key}",
                "Accept": "application/json",
            }
            self.use_api_key_param = False
        else:
            # API key v3 - pass as query parameter
            self.headers = {"Accept": "application/json"}
            self.use_api_key_param = True

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _add_api_key(self, params: dict) -> dict:
        """Add API key to params if using v3 key."""
        if self.use_api_key_param:
            params["api_key"] = self.api_key
        return params

    async def _get(self, path: str, params: dict[str, str]) -> dict[str, Any]:
        """GET a TMDB endpoint, rate limited and retried."""
        if not self.configured:
            raise RemoteCatalogError("TMDB API key is not configured")

        await self.rate_limiter.acquire("tmdb")
        client = self.client_factory()
        params = self._add_api_key({"language": self.language, **params})

        start = time.perf_counter()
        try:
            response = await retry_async(
                client.get,
                f"{TMDB_API_BASE_URL}{path}",
                params=params,
                headers=self.headers,
                config=self.retry_config,
                operation_name=f"TMDB {path}",
            )
        except httpx.HTTPError as e:
            metrics.external_api_requests_total.inc(service="tmdb", status="error")
            raise RemoteCatalogError(f"TMDB {path}: {type(e).__name__}: {e}") from e
        finally:
            metrics.external_api_duration_seconds.observe(time.perf_counter() - start, service="tmdb")

        if response is None:
            metrics.external_api_requests_total.inc(service="tmdb", status="error")
            raise RemoteCatalogError(f"TMDB {path}: no response after retries")

        metrics.external_api_requests_total.inc(service="tmdb", status=str(response.status_code))
        if response.status_code != 200:
            raise RemoteCatalogError(f"TMDB {path}: HTTP {response.status_code}")
        return response.json()

    async def get_item_details(self, kind: str, remote_id: int) -> dict[str, Any]:
        """Get a movie or show with its genre names."""
        if kind not in (TMDB_MEDIA_TYPE_MOVIE, TMDB_MEDIA_TYPE_TV):
            raise RemoteCatalogError(f"Unknown TMDB media type: {kind}")
        return await self._fetch_item_details(kind, remote_id)

    @cached("tmdb:details", ttl=CACHE_TTL_MEDIUM)
    async def _fetch_item_details(self, kind: str, remote_id: int) -> dict[str, Any]:
        """Fetch item details from TMDB API (cached)."""
        item = await self._get(f"/{kind}/{remote_id}", {})
        details = self._normalize(item, kind)
        details["genres"] = [genre["name"] for genre in item.get("genres", []) if genre.get("name")]
        details["genre_ids"] = [genre["id"] for genre in item.get("genres", []) if "id" in genre]
        return details

    async def discover_by_genres(
        self,
        genre_ids: Sequence[int],
        min_votes: int,
        sort_by: SortBy = SortBy.POPULARITY,
    ) -> list[dict[str, Any]]:
        """Discover movies carrying every one of ``genre_ids``."""
        params = {
            "sort_by": sort_by.value,
            "include_adult": "false",
            "vote_count.gte": str(min_votes),
            # Comma-joined ids mean AND
            "with_genres": ",".join(str(g) for g in genre_ids),
            "page": "1",
        }
        data = await self._get(f"/discover/{TMDB_MEDIA_TYPE_MOVIE}", params)
        return [self._normalize(item, TMDB_MEDIA_TYPE_MOVIE) for item in data.get("results", [])]

    @cached("tmdb:popular", ttl=CACHE_TTL_SHORT)
    async def get_currently_popular(self) -> list[dict[str, Any]]:
        """Get TMDB's currently popular movies (cached)."""
        data = await self._get(f"/{TMDB_MEDIA_TYPE_MOVIE}/popular", {"page": "1"})
        return [self._normalize(item, TMDB_MEDIA_TYPE_MOVIE) for item in data.get("results", [])]

    @staticmethod
    def _normalize(item: dict[str, Any], kind: str) -> dict[str, Any]:
        """Keep the fields the catalogue mapping needs, tagged with ``kind``."""
        return {
            "id": item["id"],
            "kind": kind,
            "title": item.get("title") or item.get("name", ""),
            "overview": item.get("overview"),
            "release_date": item.get("release_date") or item.get("first_air_date"),
            "genre_ids": item.get("genre_ids", []),
            "popularity": item.get("popularity") or 0,
            "vote_average": item.get("vote_average"),
            "vote_count": item.get("vote_count") or 0,
            "poster_path": item.get("poster_path"),
            "backdrop_path": item.get("backdrop_path"),
        }


# Global service instance
tmdb_service = TMDBService()
