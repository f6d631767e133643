"""Dependencies shared by content endpoints."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.db import get_db
from src.db.crud import ContentRepository
from src.services.metadata.tmdb import tmdb_service
from src.services.recommendations import RecommendationEngine
from src.services.recommendations.ports import RemoteCatalog


def get_remote_catalog() -> RemoteCatalog:
    """The remote catalogue used for recommendations."""
    return tmdb_service


def get_recommendation_engine(
    db: Annotated[AsyncSession, Depends(get_db)],
    catalog: Annotated[RemoteCatalog, Depends(get_remote_catalog)],
) -> RecommendationEngine:
    """A recommendation engine bound to the request's database session."""
    return RecommendationEngine(ContentRepository(db), catalog)
