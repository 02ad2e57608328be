"""
Subscription service layer - channel subscriptions
"""

from typing import List
from uuid import UUID

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from vidtube.core.exceptions import NotFoundError, ValidationError
from vidtube.models.subscription import Subscription
from vidtube.models.user import User
from vidtube.schemas.engagement import SubscriptionToggleResponse, SubscriptionUser

logger = structlog.get_logger()


def _subscription_user(user: User, subscription: Subscription) -> SubscriptionUser:
    return SubscriptionUser(
        id=user.id,
        username=user.username,
        fullname=user.fullname,
        avatar=user.avatar,
        subscribed_at=subscription.created_at,
    )


class SubscriptionService:
    """Service for subscription operations"""

    @staticmethod
    async def toggle_subscription(db: AsyncSession, channel_id: UUID, user: User) -> SubscriptionToggleResponse:
        """Subscribe to a channel, or unsubscribe when already subscribed"""
        subscriber_id = user.id
        if channel_id == subscriber_id:
            raise ValidationError("You cannot subscribe to your own channel", field="channel_id")
        if await db.get(User, channel_id) is None:
            raise NotFoundError("Channel", channel_id)

        removed = await db.execute(
            delete(Subscription)
            .where(Subscription.subscriber_id == subscriber_id, Subscription.channel_id == channel_id)
            .execution_options(synchronize_session=False)
        )
        if removed.rowcount:
            await db.commit()
            logger.info("Unsubscribed", channel_id=str(channel_id), subscriber_id=str(subscriber_id))
            return SubscriptionToggleResponse(action="removed", is_subscribed=False)

        db.add(Subscription(subscriber_id=subscriber_id, channel_id=channel_id))
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.info("Concurrent subscription already recorded", channel_id=str(channel_id), subscriber_id=str(subscriber_id))

        logger.info("Subscribed", channel_id=str(channel_id), subscriber_id=str(subscriber_id))
        return SubscriptionToggleResponse(action="added", is_subscribed=True)

    @staticmethod
    async def list_subscribers(db: AsyncSession, channel_id: UUID) -> List[SubscriptionUser]:
        """Users subscribed to a channel, oldest subscription first"""
        if await db.get(User, channel_id) is None:
            raise NotFoundError("Channel", channel_id)

        result = await db.execute(
            select(User, Subscription)
            .join(Subscription, Subscription.subscriber_id == User.id)
            .where(Subscription.channel_id == channel_id)
            .order_by(Subscription.created_at, Subscription.id)
        )
        return [_subscription_user(subscriber, subscription) for subscriber, subscription in result.all()]

    @staticmethod
    async def list_subscribed_channels(db: AsyncSession, subscriber_id: UUID) -> List[SubscriptionUser]:
        """Channels a user subscribes to, oldest subscription first"""
        if await db.get(User, subscriber_id) is None:
            raise NotFoundError("User", subscriber_id)

        result = await db.execute(
            select(User, Subscription)
            .join(Subscription, Subscription.channel_id == User.id)
            .where(Subscription.subscriber_id == subscriber_id)
            .order_by(Subscription.created_at, Subscription.id)
        )
        return [_subscription_user(channel, subscription) for channel, subscription in result.all()]
