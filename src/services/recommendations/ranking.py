"""Genre match scoring and the final merge/filter/sort of candidate pools."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from src.models.schemas import ContentItem
from src.services.recommendations.ids import ContentId, identity_keys, parse_content_id


@dataclass(frozen=True)
class ScoredCandidate:
    """A local candidate with its overlap against the favored genres."""

    item: ContentItem
    match_score: int  # favored genres the item carries
    genre_match_ratio: float  # match_score / number of favored genres

    def to_item(self) -> ContentItem:
        return self.item.model_copy(
            update={"match_score": self.match_score, "genre_match_ratio": self.genre_match_ratio}
        )


def score_item(item: ContentItem, favorite_genres: Sequence[str]) -> ScoredCandidate:
    """Count favored genres found (case-insensitive substring) in the item's genre field."""
    if not favorite_genres:
        return ScoredCandidate(item, 0, 0.0)

    haystack = item.genre.lower()
    score = sum(1 for genre in favorite_genres if genre.lower() in haystack)
    return ScoredCandidate(item, score, score / len(favorite_genres))


def sort_by_match(candidates: Iterable[ScoredCandidate]) -> list[ScoredCandidate]:
    """Best genre match first, then most popular (stable)."""
    return sorted(candidates, key=lambda c: (-c.match_score, -c.item.popularity))


class ExclusionSet:
    """Ids a profile must not be recommended, in either id representation."""

    def __init__(self, raw_ids: Iterable[str] = (), known_items: Iterable[ContentItem] = ()):
        self.raw_ids: set[str] = set(raw_ids)
        self.keys: set[ContentId] = set()
        for raw in self.raw_ids:
            parsed = parse_content_id(raw)
            if parsed is not None:
                self.keys.add(parsed)
        # Stored copies of excluded items contribute their other ids too
        for item in known_items:
            if item.id in self.raw_ids or identity_keys(item) & self.keys:
                self.keys |= identity_keys(item)

    def __len__(self) -> int:
        return len(self.raw_ids)

    def excludes(self, item: ContentItem) -> bool:
        return item.id in self.raw_ids or bool(identity_keys(item) & self.keys)


def rank_candidates(
    local_pool: Sequence[ScoredCandidate],
    remote_pool: Sequence[ContentItem],
    excluded: ExclusionSet,
    limit: int,
) -> list[ContentItem]:
    """Merge pools, drop excluded items, sort by popularity and cut to ``limit``.

    A title present in both pools (a local copy with a ``tmdb_id`` and its
    remote ``movie_<id>``) is kept once, as its first occurrence in pool
    order, so the local copy wins.

    Pure and deterministic: equal popularity keeps pool order (local first).
    """
    if limit <= 0:
        return []

    merged = [c.to_item() for c in local_pool] + list(remote_pool)
    kept: list[ContentItem] = []
    seen_ids: set[str] = set()
    seen_keys: set[ContentId] = set()
    for item in merged:
        if excluded.excludes(item):
            continue
        keys = identity_keys(item)
        if item.id in seen_ids or keys & seen_keys:
            continue
        seen_ids.add(item.id)
        seen_keys |= keys
        kept.append(item)

    kept.sort(key=lambda item: -item.popularity)
    return kept[:limit]
