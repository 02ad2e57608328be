"""
Like service layer - like toggles on videos, comments and tweets
"""

from typing import List
from uuid import UUID

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from vidtube.core.exceptions import NotFoundError
from vidtube.models.comment import Comment
from vidtube.models.like import Like
from vidtube.models.tweet import Tweet
from vidtube.models.user import User
from vidtube.models.video import Video
from vidtube.schemas.engagement import LikeToggleResponse
from vidtube.schemas.video import VideoWithOwner
from vidtube.services.video_service import VideoService, video_with_owner, visible_to

logger = structlog.get_logger()

# target kind -> (model, like column name, display name)
LIKE_TARGETS = {
    "video": (Video, "video_id", "Video"),
    "comment": (Comment, "comment_id", "Comment"),
    "tweet": (Tweet, "tweet_id", "Tweet"),
}


class LikeService:
    """Service for like operations"""

    @staticmethod
    async def toggle_like(db: AsyncSession, kind: str, target_id: UUID, user: User) -> LikeToggleResponse:
        """
        Remove the user's like on the target if present, otherwise add it

        An insert that loses a race against a concurrent toggle hits the unique
        constraint and counts as added.
        """
        model, column_name, entity = LIKE_TARGETS[kind]
        if model is Video:
            await VideoService.get_visible_video(db, target_id, user.id)
        elif await db.get(model, target_id) is None:
            raise NotFoundError(entity, target_id)

        column = getattr(Like, column_name)
        owner_id = user.id
        removed = await db.execute(
            delete(Like)
            .where(Like.owner_id == owner_id, column == target_id)
            .execution_options(synchronize_session=False)
        )
        if removed.rowcount:
            await db.commit()
            logger.info("Like removed", kind=kind, target_id=str(target_id), owner_id=str(owner_id))
            return LikeToggleResponse(action="removed", is_liked=False)

        db.add(Like(owner_id=owner_id, **{column_name: target_id}))
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.info("Concurrent like already recorded", kind=kind, target_id=str(target_id), owner_id=str(owner_id))

        logger.info("Like added", kind=kind, target_id=str(target_id), owner_id=str(owner_id))
        return LikeToggleResponse(action="added", is_liked=True)

    @staticmethod
    async def liked_videos(db: AsyncSession, user: User) -> List[VideoWithOwner]:
        """Videos the user liked, most recent like first"""
        result = await db.execute(
            select(Video, User)
            .join(Like, Like.video_id == Video.id)
            .join(User, User.id == Video.owner_id)
            .where(Like.owner_id == user.id, visible_to(user.id))
            .order_by(Like.created_at.desc(), Like.id.desc())
        )
        return [video_with_owner(video, owner) for video, owner in result.all()]
