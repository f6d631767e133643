"""Utility modules for the Reelbox application."""

from src.utils.logging import get_logger, LogContext, setup_logging
from src.utils.rate_limiter import RateLimitConfig, RateLimiter
from src.utils.retry import retry_async, RetryConfig

__all__ = [
    # Logging
    "get_logger",
    "LogContext",
    "setup_logging",
    # Rate limiting
    "RateLimiter",
    "RateLimitConfig",
    # Retry
    "retry_async",
    "RetryConfig",
]
