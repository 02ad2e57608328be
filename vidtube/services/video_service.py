"""
Video service layer - publishing, listing, playback bookkeeping and the delete cascade
"""

from typing import List, Optional
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy import select, func, delete, update, or_, asc, desc
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from vidtube.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from vidtube.models.comment import Comment
from vidtube.models.like import Like
from vidtube.models.playlist import PlaylistVideo
from vidtube.models.user import User
from vidtube.models.video import Video
from vidtube.models.watch_history import WatchHistoryEntry
from vidtube.schemas.common import OwnerSummary, Page, PageParams, build_page
from vidtube.schemas.video import (
    VideoDeleteResult,
    VideoListQuery,
    VideoResponse,
    VideoUpdate,
    VideoWithOwner,
)
from vidtube.services.file_upload import has_file, upload_to_storage
from vidtube.services.media_storage import MediaStorage
from vidtube.utils.validation import TITLE_MAX_LENGTH, optional_text, require_text

logger = structlog.get_logger()

SORT_COLUMNS = {
    "created_at": Video.created_at,
    "updated_at": Video.updated_at,
    "title": Video.title,
    "views": Video.views,
    "duration": Video.duration,
}


def video_with_owner(video: Video, owner: User) -> VideoWithOwner:
    """Project a video row and its owner row"""
    return VideoWithOwner(
        id=video.id,
        video_file=video.video_file,
        thumbnail=video.thumbnail,
        title=video.title,
        description=video.description,
        duration=video.duration,
        views=video.views,
        is_published=video.is_published,
        owner=OwnerSummary.model_validate(owner),
        created_at=video.created_at,
    )


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def visible_to(viewer_id: UUID):
    """Published videos plus the viewer's own drafts"""
    return or_(Video.is_published.is_(True), Video.owner_id == viewer_id)


class VideoService:
    """Service for video operations"""

    @staticmethod
    async def get_owned_video(db: AsyncSession, video_id: UUID, user: User, operation: str) -> Video:
        """Load a video and check that the acting user owns it"""
        video = await db.get(Video, video_id)
        if video is None:
            raise NotFoundError("Video", video_id)
        if video.owner_id != user.id:
            raise AuthorizationError(operation, "video")
        return video

    @staticmethod
    async def get_visible_video(db: AsyncSession, video_id: UUID, viewer_id: UUID) -> Video:
        """Load a video the viewer may see; other users' drafts are reported as missing"""
        video = await db.scalar(select(Video).where(Video.id == video_id, visible_to(viewer_id)))
        if video is None:
            raise NotFoundError("Video", video_id)
        return video

    @staticmethod
    async def list_videos(db: AsyncSession, query: VideoListQuery, viewer: User) -> Page:
        """
        Paginated listing with optional owner filter, title search and ordering
        """
        filters = [visible_to(viewer.id)]

        if query.user_id is not None:
            if await db.get(User, query.user_id) is None:
                raise NotFoundError("User", query.user_id)
            filters.append(Video.owner_id == query.user_id)

        if query.query and query.query.strip():
            pattern = f"%{_escape_like(query.query.strip())}%"
            filters.append(Video.title.ilike(pattern, escape="\\"))

        total = await db.scalar(select(func.count()).select_from(Video).where(*filters))

        direction = asc if query.sort_type == "asc" else desc
        params = PageParams(page=query.page, limit=query.limit)
        result = await db.execute(
            select(Video, User)
            .join(User, User.id == Video.owner_id)
            .where(*filters)
            .order_by(direction(SORT_COLUMNS[query.sort_by]), direction(Video.id))
            .offset(params.offset)
            .limit(params.limit)
        )
        docs = [video_with_owner(video, owner) for video, owner in result.all()]
        return build_page(docs, total or 0, params)

    @staticmethod
    async def publish_video(
        db: AsyncSession,
        media: MediaStorage,
        owner: User,
        title: Optional[str],
        description: Optional[str],
        video_file: Optional[UploadFile],
        thumbnail: Optional[UploadFile],
    ) -> VideoResponse:
        title = require_text(title, "title", TITLE_MAX_LENGTH)
        description = require_text(description, "description")
        if not has_file(video_file):
            raise ValidationError("videoFile file is required", field="videoFile")
        if not has_file(thumbnail):
            raise ValidationError("thumbnail file is required", field="thumbnail")

        uploaded = []
        try:
            video_asset = await upload_to_storage(media, video_file, "video", "videoFile")
            uploaded.append((video_asset.asset_id, "video"))
            thumbnail_asset = await upload_to_storage(media, thumbnail, "image", "thumbnail")
            uploaded.append((thumbnail_asset.asset_id, "image"))

            video = Video(
                title=title,
                description=description,
                video_url=video_asset.url,
                video_asset_id=video_asset.asset_id,
                thumbnail_url=thumbnail_asset.url,
                thumbnail_asset_id=thumbnail_asset.asset_id,
                duration=video_asset.duration or 0.0,
                owner_id=owner.id,
            )
            db.add(video)
            await db.commit()
        except Exception:
            await db.rollback()
            for asset_id, kind in uploaded:
                await media.delete(asset_id, kind)
            raise

        await db.refresh(video)
        logger.info("Video published", video_id=str(video.id), owner_id=str(owner.id), duration=video.duration)
        return VideoResponse.model_validate(video)

    @staticmethod
    async def get_video(db: AsyncSession, video_id: UUID, viewer: User) -> VideoWithOwner:
        """
        Fetch a video for playback

        Counts a view and appends the video to the viewer's watch history.
        Drafts are only visible to their owner.
        """
        row = (await db.execute(
            select(Video, User)
            .join(User, User.id == Video.owner_id)
            .where(Video.id == video_id, visible_to(viewer.id))
        )).first()
        if row is None:
            raise NotFoundError("Video", video_id)
        video, owner = row

        await db.execute(
            update(Video)
            .where(Video.id == video_id)
            .values(views=Video.views + 1)
            .execution_options(synchronize_session=False)
        )
        db.add(WatchHistoryEntry(user_id=viewer.id, video_id=video_id))
        await db.commit()
        await db.refresh(video)

        return video_with_owner(video, owner)

    @staticmethod
    async def update_video(
        db: AsyncSession,
        media: MediaStorage,
        video_id: UUID,
        user: User,
        patch: VideoUpdate,
        thumbnail: Optional[UploadFile] = None,
    ) -> VideoResponse:
        """Patch title/description and optionally replace the thumbnail"""
        video = await VideoService.get_owned_video(db, video_id, user, "update")

        title = optional_text(patch.title, "title", TITLE_MAX_LENGTH)
        description = optional_text(patch.description, "description")
        replace_thumbnail = has_file(thumbnail)
        if title is None and description is None and not replace_thumbnail:
            raise ValidationError("Provide a title, description or thumbnail to update")

        if title is not None:
            video.title = title
        if description is not None:
            video.description = description

        old_thumbnail_id = None
        new_asset = None
        if replace_thumbnail:
            new_asset = await upload_to_storage(media, thumbnail, "image", "thumbnail")
            old_thumbnail_id = video.thumbnail_asset_id
            video.thumbnail_url = new_asset.url
            video.thumbnail_asset_id = new_asset.asset_id

        try:
            await db.commit()
        except Exception:
            await db.rollback()
            if new_asset is not None:
                await media.delete(new_asset.asset_id, "image")
            raise

        if old_thumbnail_id and not await media.delete(old_thumbnail_id, "image"):
            logger.warning("Old thumbnail left in storage", video_id=str(video.id), asset_id=old_thumbnail_id)

        await db.refresh(video)
        return VideoResponse.model_validate(video)

    @staticmethod
    async def delete_video(db: AsyncSession, media: MediaStorage, video_id: UUID, user: User) -> VideoDeleteResult:
        """
        Delete a video and everything that references it

        Database rows go in one transaction, dependents first. Stored assets are
        removed after the commit; failures there are reported, not raised.
        """
        video = await VideoService.get_owned_video(db, video_id, user, "delete")
        assets = [(video.video_asset_id, "video"), (video.thumbnail_asset_id, "image")]

        try:
            comment_ids = select(Comment.id).where(Comment.video_id == video.id)
            comment_likes = await db.execute(
                delete(Like).where(Like.comment_id.in_(comment_ids)).execution_options(synchronize_session=False)
            )
            video_likes = await db.execute(
                delete(Like).where(Like.video_id == video.id).execution_options(synchronize_session=False)
            )
            comments = await db.execute(
                delete(Comment).where(Comment.video_id == video.id).execution_options(synchronize_session=False)
            )
            memberships = await db.execute(
                delete(PlaylistVideo).where(PlaylistVideo.video_id == video.id).execution_options(synchronize_session=False)
            )
            await db.execute(
                delete(WatchHistoryEntry).where(WatchHistoryEntry.video_id == video.id).execution_options(synchronize_session=False)
            )
            await db.delete(video)
            await db.commit()
        except Exception:
            await db.rollback()
            logger.error("Video delete rolled back", video_id=str(video_id), exc_info=True)
            raise

        pending: List[str] = []
        for asset_id, kind in assets:
            if not await media.delete(asset_id, kind):
                pending.append(asset_id)
                logger.warning("Asset cleanup failed", video_id=str(video_id), asset_id=asset_id, kind=kind)

        logger.info("Video deleted", video_id=str(video_id), owner_id=str(user.id), pending_assets=len(pending))
        return VideoDeleteResult(
            deleted_comments=comments.rowcount,
            deleted_likes=comment_likes.rowcount + video_likes.rowcount,
            removed_from_playlists=memberships.rowcount,
            pending_asset_cleanup=pending,
        )

    @staticmethod
    async def toggle_publish(db: AsyncSession, video_id: UUID, user: User) -> VideoResponse:
        video = await VideoService.get_owned_video(db, video_id, user, "update")
        video.is_published = not video.is_published
        await db.commit()
        await db.refresh(video)
        return VideoResponse.model_validate(video)
