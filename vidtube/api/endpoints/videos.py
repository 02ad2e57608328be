"""
Video endpoints: listing, publishing, playback and management
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.deps import get_current_user, get_media
from vidtube.core.responses import api_response
from vidtube.db.database import get_db
from vidtube.models.user import User
from vidtube.schemas.video import SortDirection, SortField, VideoListQuery, VideoUpdate
from vidtube.services.media_storage import MediaStorage
from vidtube.services.video_service import VideoService

router = APIRouter()


@router.get("")
async def get_all_videos(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    query: Optional[str] = Query(None, description="Case-insensitive search in title"),
    sort_by: SortField = Query("created_at", alias="sortBy"),
    sort_type: SortDirection = Query("desc", alias="sortType"),
    user_id: Optional[UUID] = Query(None, alias="userId"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Paginated video listing

    Returns published videos plus the caller's own drafts.
    """
    filters = VideoListQuery(
        page=page,
        limit=limit,
        query=query,
        sort_by=sort_by,
        sort_type=sort_type,
        user_id=user_id,
    )
    result = await VideoService.list_videos(db, filters, current_user)
    return api_response(result, "Videos fetched successfully")


@router.post("", status_code=status.HTTP_201_CREATED)
async def publish_video(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    videoFile: Optional[UploadFile] = File(None),
    thumbnail: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    media: MediaStorage = Depends(get_media),
):
    video = await VideoService.publish_video(db, media, current_user, title, description, videoFile, thumbnail)
    return api_response(video, "Video published successfully", status.HTTP_201_CREATED)


@router.get("/{video_id}")
async def get_video_by_id(
    video_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Fetch a video; counts a view and records it in the caller's watch history"""
    video = await VideoService.get_video(db, video_id, current_user)
    return api_response(video, "Video fetched successfully")


@router.patch("/{video_id}")
async def update_video(
    video_id: UUID,
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    thumbnail: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    media: MediaStorage = Depends(get_media),
):
    patch = VideoUpdate(title=title, description=description)
    video = await VideoService.update_video(db, media, video_id, current_user, patch, thumbnail)
    return api_response(video, "Video updated successfully")


@router.delete("/{video_id}")
async def delete_video(
    video_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    media: MediaStorage = Depends(get_media),
):
    result = await VideoService.delete_video(db, media, video_id, current_user)
    return api_response(result, "Video deleted successfully")


@router.patch("/toggle/publish/{video_id}")
async def toggle_publish_status(
    video_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    video = await VideoService.toggle_publish(db, video_id, current_user)
    return api_response(video, "Publish status toggled successfully")
