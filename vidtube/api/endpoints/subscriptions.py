"""
Subscription endpoints
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.deps import get_current_user
from vidtube.core.responses import api_response
from vidtube.db.database import get_db
from vidtube.models.user import User
from vidtube.services.subscription_service import SubscriptionService

router = APIRouter()


@router.post("/c/{channel_id}")
async def toggle_subscription(
    channel_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await SubscriptionService.toggle_subscription(db, channel_id, current_user)
    message = "Subscribed successfully" if result.is_subscribed else "Unsubscribed successfully"
    return api_response(result, message)


@router.get("/c/{channel_id}")
async def get_channel_subscribers(
    channel_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Subscribers of a channel"""
    subscribers = await SubscriptionService.list_subscribers(db, channel_id)
    return api_response(subscribers, "Subscribers fetched successfully")


@router.get("/u/{subscriber_id}")
async def get_subscribed_channels(
    subscriber_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Channels a user is subscribed to"""
    channels = await SubscriptionService.list_subscribed_channels(db, subscriber_id)
    return api_response(channels, "Subscribed channels fetched successfully")
