"""
Subscriptions between users: a subscriber follows a channel (another user)
"""

from sqlalchemy import Column, DateTime, ForeignKey, UniqueConstraint, CheckConstraint, Index, Uuid
from sqlalchemy.sql import func
from uuid import uuid4

from vidtube.db.database import Base


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    subscriber_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    channel_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uq_subscriptions_subscriber_channel"),
        CheckConstraint("subscriber_id <> channel_id", name="no_self_subscription"),
        Index("ix_subscriptions_channel", "channel_id"),
    )

    def __repr__(self):
        return f"<Subscription(subscriber_id={self.subscriber_id}, channel_id={self.channel_id})>"
