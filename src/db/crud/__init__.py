"""CRUD operations module."""

from src.db.crud.content import (
    ContentRepository,
    get_content,
    get_content_by_genres,
    get_content_by_ids,
    get_interaction,
    get_most_popular_content,
    search_content,
)
from src.db.crud.interactions import (
    get_activity_log,
    get_or_create_interaction,
    get_search_history,
    record_search,
    toggle_like,
    update_watch_progress,
)

__all__ = [
    "ContentRepository",
    "get_activity_log",
    "get_content",
    "get_content_by_genres",
    "get_content_by_ids",
    "get_interaction",
    "get_most_popular_content",
    "get_or_create_interaction",
    "get_search_history",
    "record_search",
    "search_content",
    "toggle_like",
    "update_watch_progress",
]
