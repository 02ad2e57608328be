"""
Short text posts published on a user's channel
"""

from sqlalchemy import Column, Text, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.sql import func
from uuid import uuid4

from vidtube.db.database import Base


class Tweet(Base):
    __tablename__ = "tweets"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    content = Column(Text, nullable=False)
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_tweets_owner_created", "owner_id", "created_at"),
    )

    def __repr__(self):
        return f"<Tweet(id={self.id}, owner_id={self.owner_id})>"
