"""Content model for locally stored movies and series."""

import enum
import secrets

from sqlalchemy import BigInteger, Enum, Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin


def generate_content_key() -> str:
    """Generate a 24-hex local store key."""
    return secrets.token_hex(12)


class ContentCategory(str, enum.Enum):
    """Kind of content item."""

    MOVIE = "Movie"
    SERIES = "Series"


class ContentSection(str, enum.Enum):
    """Home page row a content item is featured in."""

    CONTINUE = "continue"
    TRENDING = "trending"
    MOVIES = "movies"
    SERIES = "series"


class Content(Base, TimestampMixin):
    """A movie or series in the local catalogue.

    ``genre`` is free text holding a comma-separated list of genre names
    ("Action, Thriller"), matched by substring rather than normalized.
    """

    __tablename__ = "content"

    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=generate_content_key)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[ContentCategory] = mapped_column(
        Enum(ContentCategory, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ContentCategory.MOVIE,
    )
    genre: Mapped[str] = mapped_column(String(255), nullable=False)
    image: Mapped[str | None] = mapped_column(String(500), nullable=True)
    backdrop: Mapped[str | None] = mapped_column(String(500), nullable=True)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rating: Mapped[str] = mapped_column(String(20), default="0")
    runtime: Mapped[str | None] = mapped_column(String(50), nullable=True)
    director: Mapped[str | None] = mapped_column(String(255), nullable=True)
    cast: Mapped[str | None] = mapped_column(Text, nullable=True)
    video_file: Mapped[str | None] = mapped_column(String(500), nullable=True)
    popularity: Mapped[float] = mapped_column(Float, default=0.0)
    likes: Mapped[int] = mapped_column(Integer, default=0)
    tmdb_id: Mapped[int | None] = mapped_column(BigInteger, unique=True, nullable=True)
    section: Mapped[ContentSection] = mapped_column(
        Enum(ContentSection, values_callable=lambda e: [m.value for m in e]),
        default=ContentSection.MOVIES,
    )

    __table_args__ = (
        Index("ix_content_category", "category"),
        Index("ix_content_popular", "likes", "popularity"),
    )

    def __repr__(self) -> str:
        return f"<Content(id={self.id}, title={self.title})>"
