"""Rate limiter for external API calls.

The limiter is an ordinary object handed to the clients that need it,
with the clock injected so tests can drive time explicitly.
"""

import asyncio
import logging
import time
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass
class RateLimitConfig:
    """Configuration for rate limiting."""

    requests_per_second: float = 2.0  # Max requests per second
    burst_size: int = 5  # Allow short bursts
    min_interval: float = 0.1  # Minimum time between requests (seconds)


@dataclass
class TokenBucket:
    """Token bucket for rate limiting."""

    capacity: int
    refill_rate: float  # tokens per second
    clock: Clock = time.monotonic
    tokens: float = field(default=0.0)
    last_refill: float = field(default=0.0)

    def __post_init__(self) -> None:
        self.tokens = float(self.capacity)
        self.last_refill = self.clock()

    def _refill(self) -> None:
        """Refill tokens based on elapsed time."""
        now = self.clock()
        elapsed = now - self.last_refill
        self.tokens = min(self.capacity, self.tokens + elapsed * self.refill_rate)
        self.last_refill = now

    def acquire(self, tokens: int = 1) -> float:
        """Try to acquire tokens.

        Returns:
            Wait time in seconds (0 if tokens acquired immediately)
        """
        self._refill()

        if self.tokens >= tokens:
            self.tokens -= tokens
            return 0.0

        tokens_needed = tokens - self.tokens
        return tokens_needed / self.refill_rate


class RateLimiter:
    """Per-service token bucket limiter for external API calls."""

    DEFAULT_CONFIGS = {
        "tmdb": RateLimitConfig(requests_per_second=4.0, burst_size=10, min_interval=0.0),
        "default": RateLimitConfig(requests_per_second=2.0, burst_size=5),
    }

    def __init__(self, clock: Clock = time.monotonic) -> None:
        self._clock = clock
        self._buckets: dict[str, TokenBucket] = {}
        self._configs: dict[str, RateLimitConfig] = {}
        self._lock = asyncio.Lock()
        self._last_request: dict[str, float] = defaultdict(lambda: float("-inf"))

    def configure(self, service: str, config: RateLimitConfig) -> None:
        """Configure rate limits for a specific service."""
        self._configs[service] = config
        self._buckets.pop(service, None)

    def _get_config(self, service: str) -> RateLimitConfig:
        return self._configs.get(
            service, self.DEFAULT_CONFIGS.get(service, self.DEFAULT_CONFIGS["default"])
        )

    def _get_bucket(self, service: str) -> TokenBucket:
        """Get or create a token bucket for a service."""
        if service not in self._buckets:
            config = self._get_config(service)
            self._buckets[service] = TokenBucket(
                capacity=config.burst_size,
                refill_rate=config.requests_per_second,
                clock=self._clock,
            )
        return self._buckets[service]

    async def acquire(self, service: str = "default", tokens: int = 1) -> None:
        """Acquire rate limit tokens for a service, waiting if the bucket is empty.

        Args:
            service: Name of the service (tmdb, ...)
            tokens: Number of tokens to acquire (default 1)
        """
        async with self._lock:
            bucket = self._get_bucket(service)
            min_interval = self._get_config(service).min_interval

            elapsed = self._clock() - self._last_request[service]
            if elapsed < min_interval:
                wait = min_interval - elapsed
                logger.debug(f"Rate limit [{service}]: waiting {wait:.3f}s (min interval)")
                await asyncio.sleep(wait)

            wait_time = bucket.acquire(tokens)
            if wait_time > 0:
                logger.debug(f"Rate limit [{service}]: waiting {wait_time:.2f}s")
                await asyncio.sleep(wait_time)
                bucket._refill()
                bucket.tokens -= tokens

            self._last_request[service] = self._clock()

    def get_stats(self) -> dict[str, dict[str, float]]:
        """Get current rate limiter statistics."""
        stats = {}
        for service, bucket in self._buckets.items():
            bucket._refill()
            stats[service] = {
                "available_tokens": bucket.tokens,
                "capacity": bucket.capacity,
                "refill_rate": bucket.refill_rate,
            }
        return stats
