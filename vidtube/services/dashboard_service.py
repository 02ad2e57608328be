"""
Dashboard service layer - channel statistics for the signed-in creator
"""

from typing import List

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.models.like import Like
from vidtube.models.subscription import Subscription
from vidtube.models.user import User
from vidtube.models.video import Video
from vidtube.schemas.dashboard import ChannelStats
from vidtube.schemas.video import VideoResponse


class DashboardService:
    """Read-only aggregations over a channel"""

    @staticmethod
    async def channel_stats(db: AsyncSession, user: User) -> ChannelStats:
        """
        Totals for the channel

        - videos: number of videos owned, drafts included
        - views: sum of their view counters
        - subscribers: distinct subscribers of the channel
        - likes: likes on the channel's videos
        """
        video_totals = (await db.execute(
            select(func.count(Video.id), func.coalesce(func.sum(Video.views), 0))
            .where(Video.owner_id == user.id)
        )).one()

        total_subscribers = await db.scalar(
            select(func.count(func.distinct(Subscription.subscriber_id)))
            .where(Subscription.channel_id == user.id)
        )

        total_likes = await db.scalar(
            select(func.count(Like.id))
            .select_from(Like)
            .join(Video, Video.id == Like.video_id)
            .where(Video.owner_id == user.id)
        )

        return ChannelStats(
            total_videos=video_totals[0] or 0,
            total_views=video_totals[1] or 0,
            total_subscribers=total_subscribers or 0,
            total_likes=total_likes or 0,
        )

    @staticmethod
    async def channel_videos(db: AsyncSession, user: User) -> List[VideoResponse]:
        result = await db.scalars(
            select(Video).where(Video.owner_id == user.id).order_by(Video.created_at.desc(), Video.id)
        )
        return [VideoResponse.model_validate(video) for video in result.all()]
