"""Conversion of raw remote catalogue items into ContentItem."""

from typing import Any

from src.constants import TMDB_IMAGE_BASE_URL, TMDB_MEDIA_TYPE_MOVIE, TMDB_MEDIA_TYPE_TV
from src.models.content import ContentCategory
from src.models.schemas import ContentItem
from src.services.recommendations.genres import GenreVocabulary, vocabulary
from src.services.recommendations.ids import RemoteId


def to_content_item(raw: dict[str, Any], genres: GenreVocabulary = vocabulary) -> ContentItem:
    """Map a raw catalogue item to a ContentItem with a composite id."""
    kind = raw.get("kind") or TMDB_MEDIA_TYPE_MOVIE
    remote_id = int(raw["id"])

    release = raw.get("release_date") or raw.get("first_air_date") or ""
    vote_average = raw.get("vote_average")

    return ContentItem(
        id=str(RemoteId(kind, remote_id)),
        title=raw.get("title") or raw.get("name") or "",
        description=raw.get("overview") or "",
        category=ContentCategory.SERIES if kind == TMDB_MEDIA_TYPE_TV else ContentCategory.MOVIE,
        genre=", ".join(genres.names_for(raw.get("genre_ids") or [])),
        popularity=float(raw.get("popularity") or 0),
        likes=int(raw.get("vote_count") or 0) // 100,
        year=int(release[:4]) if release[:4].isdigit() else None,
        rating=f"{vote_average:.1f}" if vote_average is not None else None,
        image=f"{TMDB_IMAGE_BASE_URL}/w500{raw['poster_path']}" if raw.get("poster_path") else None,
        backdrop=(
            f"{TMDB_IMAGE_BASE_URL}/original{raw['backdrop_path']}"
            if raw.get("backdrop_path")
            else None
        ),
        tmdb_id=remote_id,
        source="tmdb",
    )
