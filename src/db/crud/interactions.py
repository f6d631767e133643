"""Reads and writes of profile interaction records.

Records are created lazily on a profile's first interaction. JSON columns
are always reassigned (never mutated in place) so SQLAlchemy flushes them.
"""

from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.constants import MAX_ACTIVITY_LOG, MAX_SEARCH_HISTORY
from src.db.crud.content import get_content, get_interaction
from src.models.interaction import ProfileInteraction


async def get_or_create_interaction(db: AsyncSession, profile_id: str) -> ProfileInteraction:
    """Get the interaction row for a profile, creating an empty one if needed."""
    interaction = await get_interaction(db, profile_id)
    if interaction is None:
        interaction = ProfileInteraction(
            profile_id=profile_id,
            liked_content=[],
            watch_progress={},
            search_history=[],
            activity_log=[],
        )
        db.add(interaction)
        await db.flush()
    return interaction


def _log_activity(interaction: ProfileInteraction, action: str, **extra: object) -> None:
    entry = {"action": action, "timestamp": datetime.now(UTC).isoformat(), **extra}
    interaction.activity_log = [entry, *(interaction.activity_log or [])][:MAX_ACTIVITY_LOG]


async def toggle_like(
    db: AsyncSession,
    profile_id: str,
    content_id: str,
    liked: bool,
) -> tuple[bool, int | None]:
    """Like or unlike a content item for a profile.

    Local items also have their ``likes`` counter adjusted; remote ids
    ("movie_603") are only recorded on the profile.

    Returns:
        (liked state after the call, item like count or None for remote ids)
    """
    interaction = await get_or_create_interaction(db, profile_id)
    content = await get_content(db, content_id)
    current = list(interaction.liked_content or [])

    if liked and content_id not in current:
        interaction.liked_content = [*current, content_id]
        if content is not None:
            content.likes = (content.likes or 0) + 1
        _log_activity(interaction, "like", content_id=content_id)
    elif not liked and content_id in current:
        interaction.liked_content = [c for c in current if c != content_id]
        if content is not None:
            content.likes = max(0, (content.likes or 0) - 1)
        _log_activity(interaction, "unlike", content_id=content_id)

    await db.flush()
    return content_id in interaction.liked_content, content.likes if content is not None else None


async def update_watch_progress(
    db: AsyncSession,
    profile_id: str,
    content_id: str,
    progress: float,
) -> float:
    """Record watch progress (clamped to 0-100) and return the stored value."""
    interaction = await get_or_create_interaction(db, profile_id)
    value = max(0.0, min(100.0, float(progress)))

    interaction.watch_progress = {
        **(interaction.watch_progress or {}),
        content_id: {"progress": value, "lastWatched": datetime.now(UTC).isoformat()},
    }
    _log_activity(interaction, "watch_progress", content_id=content_id, progress=value)

    await db.flush()
    return value


async def record_search(
    db: AsyncSession,
    profile_id: str,
    query: str,
    results_count: int,
) -> None:
    """Prepend a search to the profile's history, keeping the most recent ones."""
    interaction = await get_or_create_interaction(db, profile_id)
    entry = {
        "query": query,
        "results_count": results_count,
        "timestamp": datetime.now(UTC).isoformat(),
    }
    interaction.search_history = [entry, *(interaction.search_history or [])][:MAX_SEARCH_HISTORY]
    _log_activity(interaction, "search", query=query, results_count=results_count)

    await db.flush()


async def get_search_history(db: AsyncSession, profile_id: str, limit: int) -> list[dict]:
    """Most recent searches first; empty for a profile with no record."""
    interaction = await get_interaction(db, profile_id)
    if interaction is None:
        return []
    return list(interaction.search_history or [])[:limit]


async def get_activity_log(db: AsyncSession, profile_id: str, limit: int) -> list[dict]:
    """Most recent likes, unlikes, progress updates and searches first."""
    interaction = await get_interaction(db, profile_id)
    if interaction is None:
        return []
    return list(interaction.activity_log or [])[:limit]
