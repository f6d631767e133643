"""Content identifiers.

Two id namespaces coexist: local store keys (24 hex chars) and composite
remote ids ("movie_603", "tv_1399"). Raw strings are parsed once into
LocalId / RemoteId so the rest of the engine never pattern-matches ids.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

from src.constants import TMDB_MEDIA_TYPE_MOVIE, TMDB_MEDIA_TYPE_TV
from src.models.content import ContentCategory
from src.models.schemas import ContentItem

LOCAL_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")
REMOTE_ID_PATTERN = re.compile(rf"^({TMDB_MEDIA_TYPE_MOVIE}|{TMDB_MEDIA_TYPE_TV})_(\d+)$")


@dataclass(frozen=True)
class LocalId:
    """Key of an item in the local content store."""

    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RemoteId:
    """Reference to an item in the remote catalogue."""

    kind: str  # "movie" or "tv"
    remote_id: int

    def __str__(self) -> str:
        return f"{self.kind}_{self.remote_id}"


ContentId = LocalId | RemoteId


def parse_content_id(raw: str) -> ContentId | None:
    """Parse a stored id string; returns None for ids of neither shape."""
    raw = raw.strip()
    if LOCAL_ID_PATTERN.match(raw):
        return LocalId(raw.lower())
    match = REMOTE_ID_PATTERN.match(raw)
    if match:
        return RemoteId(match.group(1), int(match.group(2)))
    return None


def parse_content_ids(raw_ids: Iterable[str]) -> list[ContentId]:
    """Parse many ids, dropping unparseable ones and duplicates (order kept)."""
    parsed: dict[ContentId, None] = {}
    for raw in raw_ids:
        content_id = parse_content_id(raw)
        if content_id is not None:
            parsed.setdefault(content_id, None)
    return list(parsed)


def identity_keys(item: ContentItem) -> set[ContentId]:
    """Every id under which ``item`` may have been recorded.

    A local item imported from TMDB is also known by its composite id, so a
    like recorded as "movie_603" matches the local copy and vice versa.
    """
    keys: set[ContentId] = set()
    own = parse_content_id(item.id)
    if own is not None:
        keys.add(own)
    if item.tmdb_id is not None:
        kind = TMDB_MEDIA_TYPE_TV if item.category == ContentCategory.SERIES else TMDB_MEDIA_TYPE_MOVIE
        keys.add(RemoteId(kind, item.tmdb_id))
    return keys
