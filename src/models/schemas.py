"""Pydantic schemas for API validation and serialization."""

from datetime import datetime
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict, Field

from src.models.content import ContentCategory

if TYPE_CHECKING:
    from src.models.interaction import ProfileInteraction


# Content schemas
class ContentItem(BaseModel):
    """A catalogue item as seen by the recommendation engine and the API.

    ``id`` is either a local store key or a composite remote id
    (``"movie_603"``). Remote items carry ``source="tmdb"``.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: str
    title: str
    description: str = ""
    category: ContentCategory = ContentCategory.MOVIE
    genre: str = ""
    popularity: float = 0.0
    likes: int = 0
    year: int | None = None
    rating: str | None = None
    image: str | None = None
    backdrop: str | None = None
    tmdb_id: int | None = None
    source: Literal["local", "tmdb"] = "local"
    created_at: datetime | None = None

    # Filled in by genre scoring
    match_score: int | None = None
    genre_match_ratio: float | None = None

    @property
    def genre_list(self) -> list[str]:
        """Genre names from the comma-separated ``genre`` field."""
        return [g.strip() for g in self.genre.split(",") if g.strip()]


class ContentListResponse(BaseModel):
    """List envelope returned by content endpoints."""

    data: list[ContentItem]
    count: int


# Interaction schemas
class SearchEntry(BaseModel):
    """One recorded search."""

    query: str
    results_count: int = 0
    timestamp: datetime | None = None


class InteractionRecord(BaseModel):
    """Read-only view of a profile's interaction history."""

    model_config = ConfigDict(frozen=True)

    profile_id: str
    liked_content_ids: list[str] = Field(default_factory=list)
    watch_progress: dict[str, float] = Field(default_factory=dict)
    search_history: list[SearchEntry] = Field(default_factory=list)

    @classmethod
    def from_model(cls, row: "ProfileInteraction") -> "InteractionRecord":
        """Build from a stored ProfileInteraction row.

        Stored progress entries are ``{"progress": n, "lastWatched": ...}``;
        bare numbers are accepted too.
        """
        progress: dict[str, float] = {}
        for content_id, entry in (row.watch_progress or {}).items():
            value = entry.get("progress", 0) if isinstance(entry, dict) else entry
            progress[content_id] = float(value or 0)

        return cls(
            profile_id=row.profile_id,
            liked_content_ids=list(dict.fromkeys(row.liked_content or [])),
            watch_progress=progress,
            search_history=[SearchEntry.model_validate(s) for s in row.search_history or []],
        )

    @property
    def excluded_ids(self) -> set[str]:
        """Ids that must never be recommended back: liked or watched."""
        return set(self.liked_content_ids) | set(self.watch_progress)


class ActivityEntry(BaseModel):
    """One entry of a profile's activity log."""

    action: str  # like, unlike, watch_progress, search
    timestamp: datetime | None = None
    content_id: str | None = None
    progress: float | None = None
    query: str | None = None
    results_count: int | None = None


class SearchHistoryResponse(BaseModel):
    """A profile's recent searches."""

    data: list[SearchEntry]
    count: int


class ActivityLogResponse(BaseModel):
    """A profile's recent activity."""

    data: list[ActivityEntry]
    count: int


# Request schemas
class LikeRequest(BaseModel):
    """Like / unlike a content item."""

    profile_id: str = Field(min_length=1, max_length=64)
    liked: bool = True


class ProgressRequest(BaseModel):
    """Report watch progress for a content item."""

    profile_id: str = Field(min_length=1, max_length=64)
    progress: float = Field(ge=0, le=100)


class LikeResponse(BaseModel):
    """Result of a like toggle."""

    content_id: str
    liked: bool
    total_likes: int | None = None


class ProgressResponse(BaseModel):
    """Result of a progress update."""

    content_id: str
    progress: float
