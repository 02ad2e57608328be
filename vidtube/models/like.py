"""
Likes on videos, comments and tweets
"""

from sqlalchemy import Column, DateTime, ForeignKey, Index, UniqueConstraint, CheckConstraint, Uuid
from sqlalchemy.sql import func
from uuid import uuid4

from vidtube.db.database import Base


class Like(Base):
    """A like targets exactly one video, comment or tweet"""
    __tablename__ = "likes"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    video_id = Column(Uuid(as_uuid=True), ForeignKey("videos.id", ondelete="CASCADE"), nullable=True)
    comment_id = Column(Uuid(as_uuid=True), ForeignKey("comments.id", ondelete="CASCADE"), nullable=True)
    tweet_id = Column(Uuid(as_uuid=True), ForeignKey("tweets.id", ondelete="CASCADE"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # One like per user per target; NULL targets never collide
    __table_args__ = (
        UniqueConstraint("owner_id", "video_id", name="uq_likes_owner_video"),
        UniqueConstraint("owner_id", "comment_id", name="uq_likes_owner_comment"),
        UniqueConstraint("owner_id", "tweet_id", name="uq_likes_owner_tweet"),
        CheckConstraint(
            "(CASE WHEN video_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN comment_id IS NULL THEN 0 ELSE 1 END)"
            " + (CASE WHEN tweet_id IS NULL THEN 0 ELSE 1 END) = 1",
            name="single_target",
        ),
        Index("ix_likes_video", "video_id"),
        Index("ix_likes_comment", "comment_id"),
        Index("ix_likes_tweet", "tweet_id"),
    )

    def __repr__(self):
        return f"<Like(owner_id={self.owner_id}, video_id={self.video_id}, comment_id={self.comment_id}, tweet_id={self.tweet_id})>"
