"""Recommendation services package."""

from src.services.recommendations.engine import RecommendationEngine, Strategy
from src.services.recommendations.genres import GenreVocabulary, vocabulary
from src.services.recommendations.ports import ContentStore, RemoteCatalog, SortBy

__all__ = [
    "ContentStore",
    "GenreVocabulary",
    "RecommendationEngine",
    "RemoteCatalog",
    "SortBy",
    "Strategy",
    "vocabulary",
]
