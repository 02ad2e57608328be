"""
Video model: uploaded media plus publishing metadata
"""

from sqlalchemy import Column, String, Text, Integer, Float, Boolean, DateTime, ForeignKey, Index, CheckConstraint, Uuid
from sqlalchemy.sql import func
from uuid import uuid4

from vidtube.db.database import Base


class Video(Base):
    __tablename__ = "videos"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)

    # Media assets
    video_url = Column(String(500), nullable=False)
    video_asset_id = Column(String(500), nullable=False)
    thumbnail_url = Column(String(500), nullable=False)
    thumbnail_asset_id = Column(String(500), nullable=False)

    # Metadata
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    duration = Column(Float, nullable=False, default=0)
    views = Column(Integer, nullable=False, default=0)
    is_published = Column(Boolean, nullable=False, default=True)

    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("views >= 0", name="views_non_negative"),
        Index("ix_videos_owner_created", "owner_id", "created_at"),
    )

    def __repr__(self):
        return f"<Video(id={self.id}, title={self.title})>"

    @property
    def video_file(self):
        return {"url": self.video_url, "asset_id": self.video_asset_id}

    @property
    def thumbnail(self):
        return {"url": self.thumbnail_url, "asset_id": self.thumbnail_asset_id}
