"""
Playlists and their ordered, duplicate-free video membership
"""

from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, UniqueConstraint, Index, Uuid
from sqlalchemy.sql import func
from uuid import uuid4

from vidtube.db.database import Base


class Playlist(Base):
    __tablename__ = "playlists"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_playlists_owner", "owner_id"),
    )

    def __repr__(self):
        return f"<Playlist(id={self.id}, name={self.name})>"


class PlaylistVideo(Base):
    """Membership row; position orders the playlist"""
    __tablename__ = "playlist_videos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    playlist_id = Column(Uuid(as_uuid=True), ForeignKey("playlists.id", ondelete="CASCADE"), nullable=False)
    video_id = Column(Uuid(as_uuid=True), ForeignKey("videos.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)
    added_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("playlist_id", "video_id", name="uq_playlist_videos_playlist_video"),
        Index("ix_playlist_videos_video", "video_id"),
    )
