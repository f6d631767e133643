"""SQLAlchemy models."""

from src.models.base import Base
from src.models.content import Content, ContentCategory, ContentSection
from src.models.interaction import ProfileInteraction

__all__ = [
    "Base",
    "Content",
    "ContentCategory",
    "ContentSection",
    "ProfileInteraction",
]
