"""Per-profile interaction record (likes, watch progress, searches)."""

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, TimestampMixin


class ProfileInteraction(Base, TimestampMixin):
    """Interaction document for one profile.

    Variable-shape fields are stored as JSON:
    - liked_content: list of content ids (local keys or "movie_603")
    - watch_progress: {content_id: {"progress": 0-100, "lastWatched": iso}}
    - search_history / activity_log: most-recent-first lists, capped
    """

    __tablename__ = "profile_interactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    profile_id: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    liked_content: Mapped[list] = mapped_column(JSON, default=list)
    watch_progress: Mapped[dict] = mapped_column(JSON, default=dict)
    search_history: Mapped[list] = mapped_column(JSON, default=list)
    activity_log: Mapped[list] = mapped_column(JSON, default=list)

    def __repr__(self) -> str:
        return f"<ProfileInteraction(profile_id={self.profile_id}, likes={len(self.liked_content or [])})>"
