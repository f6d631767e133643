"""Prometheus-style metrics for the API, TMDB calls and the recommender."""

import re
import time
from collections import defaultdict
from dataclasses import dataclass, field

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

# Local 24-hex keys and composite remote ids ("movie_603")
_ID_SEGMENT = re.compile(r"^(?:[0-9a-f]{24}|(?:movie|tv)_\d+)$")

# Recommendation requests touch the store and up to three TMDB tiers
RECOMMENDATION_BUCKETS = (0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)


def _label_values(names: tuple[str, ...], labels: dict[str, str]) -> tuple[str, ...]:
    return tuple(labels.get(name, "") for name in names)


def _label_str(names: tuple[str, ...], values: tuple[str, ...]) -> str:
    return ",".join(f'{name}="{value}"' for name, value in zip(names, values))


@dataclass
class Counter:
    """Simple counter metric."""

    name: str
    help: str
    labels: tuple[str, ...] = ()
    _values: dict[tuple, float] = field(default_factory=lambda: defaultdict(float))

    def inc(self, amount: float = 1.0, **labels: str) -> None:
        """Increment the counter."""
        self._values[_label_values(self.labels, labels)] += amount

    def get(self, **labels: str) -> float:
        """Get counter value."""
        return self._values[_label_values(self.labels, labels)]

    def render(self) -> list[str]:
        lines = [f"# HELP {self.name} {self.help}", f"# TYPE {self.name} counter"]
        for values, value in self._values.items():
            if self.labels:
                lines.append(f"{self.name}{{{_label_str(self.labels, values)}}} {value}")
            else:
                lines.append(f"{self.name} {value}")
        return lines


@dataclass
class Histogram:
    """Simple histogram metric with predefined buckets."""

    name: str
    help: str
    labels: tuple[str, ...] = ()
    buckets: tuple[float, ...] = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)
    _counts: dict[tuple, dict[float, int]] = field(
        default_factory=lambda: defaultdict(lambda: defaultdict(int))
    )
    _sums: dict[tuple, float] = field(default_factory=lambda: defaultdict(float))
    _totals: dict[tuple, int] = field(default_factory=lambda: defaultdict(int))

    def observe(self, value: float, **labels: str) -> None:
        """Observe a value."""
        values = _label_values(self.labels, labels)
        self._sums[values] += value
        self._totals[values] += 1
        for bucket in self.buckets:
            if value <= bucket:
                self._counts[values][bucket] += 1

    def count(self, **labels: str) -> int:
        """Number of observations for a label set."""
        return self._totals[_label_values(self.labels, labels)]

    def render(self) -> list[str]:
        lines = [f"# HELP {self.name} {self.help}", f"# TYPE {self.name} histogram"]
        for values in list(self._sums):
            prefix = _label_str(self.labels, values)
            sep = "," if prefix else ""
            # Observations are counted once per bucket they fit, so these are cumulative
            for bucket in self.buckets:
                lines.append(
                    f'{self.name}_bucket{{{prefix}{sep}le="{bucket}"}} {self._counts[values].get(bucket, 0)}'
                )
            lines.append(f'{self.name}_bucket{{{prefix}{sep}le="+Inf"}} {self._totals[values]}')
            lines.append(f"{self.name}_sum{{{prefix}}} {self._sums[values]}")
            lines.append(f"{self.name}_count{{{prefix}}} {self._totals[values]}")
        return lines


class MetricsRegistry:
    """Registry for all metrics."""

    def __init__(self):
        # HTTP metrics
        self.http_requests_total = Counter(
            name="http_requests_total",
            help="Total number of HTTP requests",
            labels=("method", "path", "status"),
        )

        self.http_request_duration_seconds = Histogram(
            name="http_request_duration_seconds",
            help="HTTP request duration in seconds",
            labels=("method", "path"),
        )

        # Remote catalog metrics
        self.external_api_requests_total = Counter(
            name="external_api_requests_total",
            help="Total number of external API requests",
            labels=("service", "status"),
        )

        self.external_api_duration_seconds = Histogram(
            name="external_api_duration_seconds",
            help="External API request duration in seconds",
            labels=("service",),
        )

        # Recommendation metrics
        self.recommendation_requests_total = Counter(
            name="recommendation_requests_total",
            help="Recommendation requests by the strategy that produced the result",
            labels=("strategy",),
        )

        self.recommendation_duration_seconds = Histogram(
            name="recommendation_duration_seconds",
            help="Time to build a recommendation list, by strategy",
            labels=("strategy",),
            buckets=RECOMMENDATION_BUCKETS,
        )

        self.recommendation_tier_failures_total = Counter(
            name="recommendation_tier_failures_total",
            help="Fallback tiers that failed and were skipped",
            labels=("tier",),
        )

    def format_prometheus(self) -> str:
        """Format all metrics in Prometheus exposition format."""
        lines: list[str] = []
        for metric in self.__dict__.values():
            if isinstance(metric, (Counter, Histogram)):
                lines.extend(metric.render())
        return "\n".join(lines)


# Global metrics registry
metrics = MetricsRegistry()


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to collect HTTP metrics."""

    async def dispatch(self, request: Request, call_next) -> Response:
        method = request.method
        path = self._normalize_path(request.url.path)

        start_time = time.monotonic()
        try:
            response = await call_next(request)
            status = str(response.status_code)
        except Exception:
            status = "500"
            raise
        finally:
            duration = time.monotonic() - start_time
            metrics.http_requests_total.inc(method=method, path=path, status=status)
            metrics.http_request_duration_seconds.observe(duration, method=method, path=path)

        return response

    def _normalize_path(self, path: str) -> str:
        """Collapse content ids so each route is one label value."""
        return "/".join(
            ":id" if part.isdigit() or _ID_SEGMENT.match(part) else part
            for part in path.split("/")
        )
