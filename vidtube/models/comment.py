"""
Comments left by users on videos
"""

from sqlalchemy import Column, Text, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.sql import func
from uuid import uuid4

from vidtube.db.database import Base


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    content = Column(Text, nullable=False)
    video_id = Column(Uuid(as_uuid=True), ForeignKey("videos.id", ondelete="CASCADE"), nullable=False)
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_comments_video_created", "video_id", "created_at"),
    )

    def __repr__(self):
        return f"<Comment(id={self.id}, video_id={self.video_id})>"
