"""Read operations on the local content store."""

from collections.abc import Sequence

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.content import Content
from src.models.interaction import ProfileInteraction
from src.models.schemas import ContentItem, InteractionRecord
from src.services.recommendations.ports import ContentStore


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so genre names match literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def genre_pattern_clause(genres: Sequence[str]):
    """Case-insensitive "genre contains any of" condition."""
    return or_(*[Content.genre.ilike(f"%{_escape_like(g)}%", escape="\\") for g in genres])


async def get_content(db: AsyncSession, content_id: str) -> Content | None:
    """Get a single content row by its local key."""
    return await db.get(Content, content_id)


async def get_content_by_ids(db: AsyncSession, ids: Sequence[str]) -> Sequence[Content]:
    """Get content rows for the given local keys, in store order."""
    if not ids:
        return []
    result = await db.execute(select(Content).where(Content.id.in_(list(ids))))
    return result.scalars().all()


async def get_content_by_genres(
    db: AsyncSession,
    genres: Sequence[str],
    limit: int,
) -> Sequence[Content]:
    """Get the most popular content whose genre field mentions any of ``genres``."""
    if not genres or limit <= 0:
        return []
    result = await db.execute(
        select(Content)
        .where(genre_pattern_clause(genres))
        .order_by(Content.popularity.desc(), Content.likes.desc(), Content.id)
        .limit(limit)
    )
    return result.scalars().all()


async def get_most_popular_content(db: AsyncSession, limit: int) -> Sequence[Content]:
    """Get content sorted by likes, then popularity, then most recent."""
    if limit <= 0:
        return []
    result = await db.execute(
        select(Content)
        .order_by(Content.likes.desc(), Content.popularity.desc(), Content.created_at.desc(), Content.id)
        .limit(limit)
    )
    return result.scalars().all()


async def search_content(db: AsyncSession, query: str, limit: int = 20) -> Sequence[Content]:
    """Search title, description and genre (case-insensitive substring)."""
    term = f"%{_escape_like(query.strip())}%"
    result = await db.execute(
        select(Content)
        .where(
            or_(
                Content.title.ilike(term, escape="\\"),
                Content.description.ilike(term, escape="\\"),
                Content.genre.ilike(term, escape="\\"),
            )
        )
        .order_by(Content.popularity.desc(), Content.id)
        .limit(limit)
    )
    return result.scalars().all()


async def get_interaction(db: AsyncSession, profile_id: str) -> ProfileInteraction | None:
    """Get the stored interaction row for a profile."""
    result = await db.execute(
        select(ProfileInteraction).where(ProfileInteraction.profile_id == profile_id)
    )
    return result.scalar_one_or_none()


class ContentRepository(ContentStore):
    """ContentStore backed by the SQL database session of the current request."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_items_by_ids(self, ids: Sequence[str]) -> list[ContentItem]:
        rows = await get_content_by_ids(self.db, ids)
        return [ContentItem.model_validate(row) for row in rows]

    async def find_items_by_genre_pattern(self, genres: Sequence[str], limit: int) -> list[ContentItem]:
        rows = await get_content_by_genres(self.db, genres, limit)
        return [ContentItem.model_validate(row) for row in rows]

    async def find_item_by_id(self, content_id: str) -> ContentItem | None:
        row = await get_content(self.db, content_id)
        return ContentItem.model_validate(row) if row else None

    async def find_most_popular(self, limit: int) -> list[ContentItem]:
        rows = await get_most_popular_content(self.db, limit)
        return [ContentItem.model_validate(row) for row in rows]

    async def get_interaction_record(self, profile_id: str) -> InteractionRecord | None:
        row = await get_interaction(self.db, profile_id)
        return InteractionRecord.from_model(row) if row else None

    async def search(self, query: str, limit: int = 20) -> list[ContentItem]:
        rows = await search_content(self.db, query, limit)
        return [ContentItem.model_validate(row) for row in rows]
