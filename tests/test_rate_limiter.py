"""Tests for the token bucket rate limiter."""

from unittest.mock import AsyncMock, patch

import pytest

from src.utils.rate_limiter import RateLimitConfig, RateLimiter, TokenBucket


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestTokenBucket:
    """Tests for TokenBucket."""

    def test_burst_then_wait(self):
        """Test that a full bucket serves a burst and then reports a wait."""
        clock = FakeClock()
        bucket = TokenBucket(capacity=2, refill_rate=1.0, clock=clock)

        assert bucket.acquire() == 0.0
        assert bucket.acquire() == 0.0
        assert bucket.acquire() == pytest.approx(1.0)

    def test_refill_over_time(self):
        """Test that tokens come back as the clock advances."""
        clock = FakeClock()
        bucket = TokenBucket(capacity=1, refill_rate=2.0, clock=clock)
        bucket.acquire()

        clock.now += 0.5

        assert bucket.acquire() == 0.0


class TestRateLimiter:
    """Tests for RateLimiter."""

    @pytest.mark.asyncio
    async def test_no_wait_within_burst(self):
        """Test that calls inside the burst do not sleep."""
        limiter = RateLimiter(clock=FakeClock())
        limiter.configure("tmdb", RateLimitConfig(requests_per_second=1.0, burst_size=3, min_interval=0.0))

        with patch("src.utils.rate_limiter.asyncio.sleep", new=AsyncMock()) as sleep:
            for _ in range(3):
                await limiter.acquire("tmdb")

        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_waits_when_exhausted(self):
        """Test that an empty bucket makes the caller sleep."""
        limiter = RateLimiter(clock=FakeClock())
        limiter.configure("tmdb", RateLimitConfig(requests_per_second=2.0, burst_size=1, min_interval=0.0))

        with patch("src.utils.rate_limiter.asyncio.sleep", new=AsyncMock()) as sleep:
            await limiter.acquire("tmdb")
            await limiter.acquire("tmdb")

        sleep.assert_awaited_once_with(pytest.approx(0.5))

    def test_stats(self):
        """Test that stats list configured buckets."""
        limiter = RateLimiter(clock=FakeClock())
        limiter._get_bucket("tmdb")

        stats = limiter.get_stats()

        assert stats["tmdb"]["capacity"] == 10
        assert stats["tmdb"]["refill_rate"] == 4.0
