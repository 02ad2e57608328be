"""
Ordered watch history of a user; the same video may appear many times
"""

from sqlalchemy import Column, Integer, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.sql import func

from vidtube.db.database import Base


class WatchHistoryEntry(Base):
    __tablename__ = "watch_history"

    # Autoincrement key keeps insertion order
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    video_id = Column(Uuid(as_uuid=True), ForeignKey("videos.id", ondelete="CASCADE"), nullable=False)
    watched_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_watch_history_user", "user_id", "id"),
    )

    def __repr__(self):
        return f"<WatchHistoryEntry(user_id={self.user_id}, video_id={self.video_id})>"
