"""Content API endpoints: browsing, recommendations and interactions."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_recommendation_engine
from src.constants import (
    DEFAULT_ACTIVITY_LIMIT,
    DEFAULT_RECOMMENDATION_LIMIT,
    DEFAULT_RELATED_LIMIT,
    DEFAULT_SEARCH_HISTORY_LIMIT,
    MAX_ACTIVITY_LOG,
    MAX_PAGE_SIZE,
    MAX_SEARCH_HISTORY,
    MAX_SEARCH_RESULTS,
)
from src.db import get_db
from src.db.crud import (
    ContentRepository,
    get_activity_log,
    get_content,
    get_search_history,
    record_search,
    toggle_like,
    update_watch_progress,
)
from src.models.schemas import (
    ActivityLogResponse,
    ContentListResponse,
    LikeRequest,
    LikeResponse,
    ProgressRequest,
    ProgressResponse,
    SearchHistoryResponse,
)
from src.services.recommendations import RecommendationEngine
from src.services.recommendations.ids import LocalId, parse_content_id

router = APIRouter()
logger = logging.getLogger(__name__)


async def _resolve_content_id(db: AsyncSession, content_id: str) -> str:
    """Normalized id of an existing local item or any remote item, else 404."""
    parsed = parse_content_id(content_id)
    if parsed is None:
        raise HTTPException(status_code=404, detail="Content not found")
    if isinstance(parsed, LocalId) and await get_content(db, str(parsed)) is None:
        raise HTTPException(status_code=404, detail="Content not found")
    return str(parsed)


@router.get("/trending", response_model=ContentListResponse)
async def trending_content(
    engine: Annotated[RecommendationEngine, Depends(get_recommendation_engine)],
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_RECOMMENDATION_LIMIT,
) -> ContentListResponse:
    """Most liked local content."""
    items = await engine.get_popular_content(limit)
    return ContentListResponse(data=items, count=len(items))


@router.get("/popular/mixed", response_model=ContentListResponse)
async def mixed_popular_content(
    engine: Annotated[RecommendationEngine, Depends(get_recommendation_engine)],
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_RECOMMENDATION_LIMIT,
) -> ContentListResponse:
    """Local and TMDB popular content, shuffled together."""
    items = await engine.get_mixed_popular_content(limit)
    return ContentListResponse(data=items, count=len(items))


@router.get("/recommendations/{profile_id}", response_model=ContentListResponse)
async def profile_recommendations(
    profile_id: str,
    engine: Annotated[RecommendationEngine, Depends(get_recommendation_engine)],
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_RECOMMENDATION_LIMIT,
) -> ContentListResponse:
    """Personalized recommendations for a profile."""
    items = await engine.get_recommendations(profile_id, limit)
    return ContentListResponse(data=items, count=len(items))


@router.get("/search", response_model=ContentListResponse)
async def search(
    db: Annotated[AsyncSession, Depends(get_db)],
    q: Annotated[str, Query(min_length=1, max_length=200)],
    profile_id: Annotated[str | None, Query(max_length=64)] = None,
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = MAX_SEARCH_RESULTS,
) -> ContentListResponse:
    """Search local content; the query is added to the profile's history."""
    items = await ContentRepository(db).search(q, limit)
    if profile_id:
        await record_search(db, profile_id, q, len(items))
    return ContentListResponse(data=items, count=len(items))


@router.get("/profile/{profile_id}/search-history", response_model=SearchHistoryResponse)
async def profile_search_history(
    profile_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: Annotated[int, Query(ge=1, le=MAX_SEARCH_HISTORY)] = DEFAULT_SEARCH_HISTORY_LIMIT,
) -> SearchHistoryResponse:
    """A profile's most recent searches."""
    entries = await get_search_history(db, profile_id, limit)
    return SearchHistoryResponse(data=entries, count=len(entries))


@router.get("/profile/{profile_id}/activity", response_model=ActivityLogResponse)
async def profile_activity(
    profile_id: str,
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: Annotated[int, Query(ge=1, le=MAX_ACTIVITY_LOG)] = DEFAULT_ACTIVITY_LIMIT,
) -> ActivityLogResponse:
    """A profile's most recent likes, progress updates and searches."""
    entries = await get_activity_log(db, profile_id, limit)
    return ActivityLogResponse(data=entries, count=len(entries))


@router.get("/{content_id}/related", response_model=ContentListResponse)
async def related_content(
    content_id: str,
    engine: Annotated[RecommendationEngine, Depends(get_recommendation_engine)],
    limit: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = DEFAULT_RELATED_LIMIT,
) -> ContentListResponse:
    """More like this: local items sharing genres with the given item."""
    items = await engine.get_related_content(content_id, limit)
    return ContentListResponse(data=items, count=len(items))


@router.post("/{content_id}/like", response_model=LikeResponse)
async def like_content(
    content_id: str,
    data: LikeRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> LikeResponse:
    """Like or unlike a local or TMDB item."""
    content_id = await _resolve_content_id(db, content_id)
    liked, total_likes = await toggle_like(db, data.profile_id, content_id, data.liked)
    logger.info(f"Profile {data.profile_id} {'liked' if liked else 'unliked'} {content_id}")
    return LikeResponse(content_id=content_id, liked=liked, total_likes=total_likes)


@router.post("/{content_id}/progress", response_model=ProgressResponse)
async def content_progress(
    content_id: str,
    data: ProgressRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ProgressResponse:
    """Record how far a profile has watched an item."""
    content_id = await _resolve_content_id(db, content_id)
    progress = await update_watch_progress(db, data.profile_id, content_id, data.progress)
    return ProgressResponse(content_id=content_id, progress=progress)
