"""
Like endpoints
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.deps import get_current_user
from vidtube.core.responses import api_response
from vidtube.db.database import get_db
from vidtube.models.user import User
from vidtube.services.like_service import LikeService

router = APIRouter()


def _toggle_message(result) -> str:
    return "Liked successfully" if result.is_liked else "Like removed successfully"


@router.post("/toggle/v/{video_id}")
async def toggle_video_like(
    video_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await LikeService.toggle_like(db, "video", video_id, current_user)
    return api_response(result, _toggle_message(result))


@router.post("/toggle/c/{comment_id}")
async def toggle_comment_like(
    comment_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await LikeService.toggle_like(db, "comment", comment_id, current_user)
    return api_response(result, _toggle_message(result))


@router.post("/toggle/t/{tweet_id}")
async def toggle_tweet_like(
    tweet_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await LikeService.toggle_like(db, "tweet", tweet_id, current_user)
    return api_response(result, _toggle_message(result))


@router.get("/videos")
async def get_liked_videos(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    videos = await LikeService.liked_videos(db, current_user)
    return api_response(videos, "Liked videos fetched successfully")
