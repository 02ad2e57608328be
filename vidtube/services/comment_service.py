"""
Comment service layer - comments on videos
"""

from uuid import UUID

from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from vidtube.core.exceptions import AuthorizationError, NotFoundError
from vidtube.models.comment import Comment
from vidtube.models.like import Like
from vidtube.models.user import User
from vidtube.schemas.comment import CommentResponse, CommentWithOwner
from vidtube.schemas.common import OwnerSummary, Page, PageParams, build_page
from vidtube.services.video_service import VideoService
from vidtube.utils.validation import require_text

logger = structlog.get_logger()


class CommentService:
    """Service for comment operations"""

    @staticmethod
    async def _get_owned_comment(db: AsyncSession, comment_id: UUID, user: User, operation: str) -> Comment:
        comment = await db.get(Comment, comment_id)
        if comment is None:
            raise NotFoundError("Comment", comment_id)
        if comment.owner_id != user.id:
            raise AuthorizationError(operation, "comment")
        return comment

    @staticmethod
    async def list_comments(db: AsyncSession, video_id: UUID, viewer: User, params: PageParams) -> Page:
        """
        Comments of a video, newest first, with author and like count
        """
        await VideoService.get_visible_video(db, video_id, viewer.id)

        total = await db.scalar(
            select(func.count()).select_from(Comment).where(Comment.video_id == video_id)
        )

        likes_count = (
            select(func.count(Like.id))
            .where(Like.comment_id == Comment.id)
            .correlate(Comment)
            .scalar_subquery()
        )
        result = await db.execute(
            select(Comment, User, likes_count)
            .join(User, User.id == Comment.owner_id)
            .where(Comment.video_id == video_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .offset(params.offset)
            .limit(params.limit)
        )

        docs = [
            CommentWithOwner(
                id=comment.id,
                content=comment.content,
                video=comment.video_id,
                owner=OwnerSummary.model_validate(owner),
                likes_count=count or 0,
                created_at=comment.created_at,
                updated_at=comment.updated_at,
            )
            for comment, owner, count in result.all()
        ]
        return build_page(docs, total or 0, params)

    @staticmethod
    async def add_comment(db: AsyncSession, video_id: UUID, user: User, content: str) -> CommentResponse:
        content = require_text(content, "content")
        await VideoService.get_visible_video(db, video_id, user.id)

        comment = Comment(content=content, video_id=video_id, owner_id=user.id)
        db.add(comment)
        await db.commit()
        await db.refresh(comment)

        logger.info("Comment added", comment_id=str(comment.id), video_id=str(video_id), owner_id=str(user.id))
        return CommentResponse.model_validate(comment)

    @staticmethod
    async def update_comment(db: AsyncSession, comment_id: UUID, user: User, content: str) -> CommentResponse:
        content = require_text(content, "content")
        comment = await CommentService._get_owned_comment(db, comment_id, user, "edit")

        comment.content = content
        await db.commit()
        await db.refresh(comment)
        return CommentResponse.model_validate(comment)

    @staticmethod
    async def delete_comment(db: AsyncSession, comment_id: UUID, user: User) -> None:
        """Delete a comment together with the likes on it"""
        comment = await CommentService._get_owned_comment(db, comment_id, user, "delete")

        await db.execute(
            delete(Like).where(Like.comment_id == comment.id).execution_options(synchronize_session=False)
        )
        await db.delete(comment)
        await db.commit()
        logger.info("Comment deleted", comment_id=str(comment_id), owner_id=str(user.id))
