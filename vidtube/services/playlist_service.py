"""
Playlist service layer - playlists with ordered, duplicate-free membership
"""

from typing import List
from uuid import UUID

from sqlalchemy import select, func, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from vidtube.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from vidtube.models.playlist import Playlist, PlaylistVideo
from vidtube.models.user import User
from vidtube.models.video import Video
from vidtube.schemas.playlist import PlaylistCreate, PlaylistResponse, PlaylistUpdate
from vidtube.services.video_service import VideoService
from vidtube.utils.validation import NAME_MAX_LENGTH, optional_text, require_text

logger = structlog.get_logger()


class PlaylistService:
    """Service for playlist operations"""

    @staticmethod
    async def _video_ids(db: AsyncSession, playlist_id: UUID) -> List[UUID]:
        result = await db.scalars(
            select(PlaylistVideo.video_id)
            .where(PlaylistVideo.playlist_id == playlist_id)
            .order_by(PlaylistVideo.position, PlaylistVideo.id)
        )
        return list(result.all())

    @staticmethod
    async def _to_response(db: AsyncSession, playlist: Playlist) -> PlaylistResponse:
        return PlaylistResponse(
            id=playlist.id,
            name=playlist.name,
            description=playlist.description,
            owner=playlist.owner_id,
            videos=await PlaylistService._video_ids(db, playlist.id),
            created_at=playlist.created_at,
            updated_at=playlist.updated_at,
        )

    @staticmethod
    async def _get_playlist(db: AsyncSession, playlist_id: UUID) -> Playlist:
        playlist = await db.get(Playlist, playlist_id)
        if playlist is None:
            raise NotFoundError("Playlist", playlist_id)
        return playlist

    @staticmethod
    async def _get_owned_playlist(db: AsyncSession, playlist_id: UUID, user: User, operation: str) -> Playlist:
        playlist = await PlaylistService._get_playlist(db, playlist_id)
        if playlist.owner_id != user.id:
            raise AuthorizationError(operation, "playlist")
        return playlist

    @staticmethod
    async def create_playlist(db: AsyncSession, user: User, data: PlaylistCreate) -> PlaylistResponse:
        playlist = Playlist(
            name=require_text(data.name, "name", NAME_MAX_LENGTH),
            description=(data.description or "").strip(),
            owner_id=user.id,
        )
        db.add(playlist)
        await db.commit()
        await db.refresh(playlist)
        logger.info("Playlist created", playlist_id=str(playlist.id), owner_id=str(user.id))
        return await PlaylistService._to_response(db, playlist)

    @staticmethod
    async def list_user_playlists(db: AsyncSession, user_id: UUID) -> List[PlaylistResponse]:
        if await db.get(User, user_id) is None:
            raise NotFoundError("User", user_id)

        result = await db.scalars(
            select(Playlist).where(Playlist.owner_id == user_id).order_by(Playlist.created_at.desc(), Playlist.id)
        )
        return [await PlaylistService._to_response(db, playlist) for playlist in result.all()]

    @staticmethod
    async def get_playlist(db: AsyncSession, playlist_id: UUID) -> PlaylistResponse:
        playlist = await PlaylistService._get_playlist(db, playlist_id)
        return await PlaylistService._to_response(db, playlist)

    @staticmethod
    async def add_video(db: AsyncSession, playlist_id: UUID, video_id: UUID, user: User) -> PlaylistResponse:
        """
        Append a video unless it is already in the playlist

        Membership is a set: the unique (playlist, video) constraint turns a
        concurrent duplicate insert into a no-op.
        """
        playlist = await PlaylistService._get_owned_playlist(db, playlist_id, user, "modify")
        await VideoService.get_visible_video(db, video_id, user.id)

        already_member = await db.scalar(
            select(PlaylistVideo.id).where(
                PlaylistVideo.playlist_id == playlist_id,
                PlaylistVideo.video_id == video_id,
            )
        )
        if already_member is None:
            next_position = await db.scalar(
                select(func.coalesce(func.max(PlaylistVideo.position), -1) + 1)
                .where(PlaylistVideo.playlist_id == playlist_id)
            )
            db.add(PlaylistVideo(playlist_id=playlist_id, video_id=video_id, position=next_position))
            try:
                await db.commit()
            except IntegrityError:
                await db.rollback()
                await db.refresh(playlist)
                logger.info("Video already in playlist", playlist_id=str(playlist_id), video_id=str(video_id))

        return await PlaylistService._to_response(db, playlist)

    @staticmethod
    async def remove_video(db: AsyncSession, playlist_id: UUID, video_id: UUID, user: User) -> PlaylistResponse:
        playlist = await PlaylistService._get_owned_playlist(db, playlist_id, user, "modify")
        if await db.get(Video, video_id) is None:
            raise NotFoundError("Video", video_id)

        await db.execute(
            delete(PlaylistVideo)
            .where(PlaylistVideo.playlist_id == playlist_id, PlaylistVideo.video_id == video_id)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return await PlaylistService._to_response(db, playlist)

    @staticmethod
    async def update_playlist(db: AsyncSession, playlist_id: UUID, user: User, patch: PlaylistUpdate) -> PlaylistResponse:
        name = optional_text(patch.name, "name", NAME_MAX_LENGTH)
        if name is None and patch.description is None:
            raise ValidationError("Provide a name or description to update")

        playlist = await PlaylistService._get_owned_playlist(db, playlist_id, user, "update")
        if name is not None:
            playlist.name = name
        if patch.description is not None:
            playlist.description = patch.description.strip()

        await db.commit()
        await db.refresh(playlist)
        return await PlaylistService._to_response(db, playlist)

    @staticmethod
    async def delete_playlist(db: AsyncSession, playlist_id: UUID, user: User) -> None:
        playlist = await PlaylistService._get_owned_playlist(db, playlist_id, user, "delete")
        await db.execute(
            delete(PlaylistVideo).where(PlaylistVideo.playlist_id == playlist.id).execution_options(synchronize_session=False)
        )
        await db.delete(playlist)
        await db.commit()
        logger.info("Playlist deleted", playlist_id=str(playlist_id), owner_id=str(user.id))
