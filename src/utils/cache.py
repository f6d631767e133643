"""Redis caching utilities for remote catalog responses.

Provides async Redis caching with automatic serialization/deserialization,
TTL management, and cache key namespacing. When Redis is unreachable the
cache is a transparent pass-through.
"""

import hashlib
import json
from collections.abc import Callable
from datetime import timedelta
from functools import wraps
from typing import Any, TypeVar

import redis.asyncio as redis

from src.config import get_settings
from src.utils.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

F = TypeVar("F", bound=Callable[..., Any])

# Cache TTL defaults
CACHE_TTL_SHORT = timedelta(minutes=15)  # Popular lists
CACHE_TTL_MEDIUM = timedelta(hours=6)    # Item details


class RedisCache:
    """Async Redis cache client with JSON serialization."""

    def __init__(self) -> None:
        self._client: redis.Redis | None = None
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected

    async def _get_client(self) -> redis.Redis:
        """Get or create Redis client."""
        if self._client is None:
            self._client = redis.from_url(
                str(settings.redis_url),
                encoding="utf-8",
                decode_responses=True,
            )
        return self._client

    async def connect(self) -> bool:
        """Test Redis connection."""
        try:
            client = await self._get_client()
            await client.ping()
            self._connected = True
            return True
        except Exception as e:
            logger.warning(f"Redis cache unavailable: {e}")
            self._connected = False
            return False

    async def ping(self) -> bool:
        """Ping Redis to check connection health."""
        client = await self._get_client()
        return await client.ping()

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None
            self._connected = False

    async def get(self, key: str) -> Any | None:
        """Get value from cache.

        Returns:
            Cached value or None if not found/expired
        """
        if not self._connected:
            return None

        try:
            client = await self._get_client()
            data = await client.get(key)
            if data:
                return json.loads(data)
            return None
        except Exception as e:
            logger.debug(f"Cache get error for {key}: {e}")
            return None

    async def set(
        self,
        key: str,
        value: Any,
        ttl: timedelta | None = None,
    ) -> bool:
        """Set value in cache (value must be JSON serializable)."""
        if not self._connected:
            return False

        try:
            client = await self._get_client()
            serialized = json.dumps(value, default=str)
            expire_seconds = int((ttl or CACHE_TTL_MEDIUM).total_seconds())
            await client.setex(key, expire_seconds, serialized)
            return True
        except Exception as e:
            logger.debug(f"Cache set error for {key}: {e}")
            return False


# Global cache instance
cache = RedisCache()


def make_cache_key(namespace: str, *args: Any, **kwargs: Any) -> str:
    """Generate a cache key from function arguments.

    Args:
        namespace: Key prefix (e.g., "tmdb:details")
        *args: Positional arguments to include in key
        **kwargs: Keyword arguments to include in key

    Returns:
        Cache key string
    """
    parts = [namespace]

    for arg in args:
        if arg is not None:
            parts.append(str(arg))

    for key, value in sorted(kwargs.items()):
        if value is not None:
            parts.append(f"{key}={value}")

    key_str = ":".join(parts)

    # Keep keys readable
    if len(key_str) > 200:
        hash_suffix = hashlib.md5(key_str.encode()).hexdigest()[:12]
        key_str = f"{namespace}:{hash_suffix}"

    return key_str


def cached(
    namespace: str,
    ttl: timedelta | None = None,
    skip_self: bool = True,
) -> Callable[[F], F]:
    """Decorator to cache async function results in Redis.

    None results are never cached, so failures are retried on the next call.

    Example:
        @cached("tmdb:details", ttl=CACHE_TTL_MEDIUM)
        async def _fetch_details(self, kind: str, remote_id: int):
            ...
    """
    def decorator(func: F) -> F:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            cache_args = args[1:] if skip_self else args
            cache_key = make_cache_key(namespace, *cache_args, **kwargs)

            cached_value = await cache.get(cache_key)
            if cached_value is not None:
                logger.debug(f"Cache HIT: {cache_key}")
                return cached_value

            logger.debug(f"Cache MISS: {cache_key}")
            result = await func(*args, **kwargs)

            if result is not None:
                await cache.set(cache_key, result, ttl or CACHE_TTL_MEDIUM)

            return result

        return wrapper  # type: ignore

    return decorator
