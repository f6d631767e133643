"""Outcome of one fallback tier.

Every upstream call the engine makes (a store read, a remote lookup, a
discovery query) runs as a tier. A failing tier is logged, counted and
turned into an empty result; it never raises past the component that ran it.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from src.utils.logging import LogContext
from src.utils.metrics import metrics

T = TypeVar("T")


@dataclass(frozen=True)
class TierResult(Generic[T]):
    """Items produced by a tier, or the reason it produced none."""

    tier: str
    items: list[T] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, tier: str, items: list[T]) -> "TierResult[T]":
        return cls(tier=tier, items=list(items))

    @classmethod
    def failure(cls, tier: str, error: str) -> "TierResult[T]":
        return cls(tier=tier, error=error)


async def run_tier(
    tier: str,
    call: Callable[[], Awaitable[list[T]]],
    log: logging.Logger | LogContext,
) -> TierResult[T]:
    """Await ``call`` and wrap its outcome; exceptions become a failed tier."""
    try:
        items = await call()
    except Exception as e:
        log.warning(f"Tier {tier} failed: {type(e).__name__}: {e}")
        metrics.recommendation_tier_failures_total.inc(tier=tier)
        return TierResult.failure(tier, str(e) or type(e).__name__)
    return TierResult.success(tier, items)
