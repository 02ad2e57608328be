"""
Creator dashboard endpoints
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.deps import get_current_user
from vidtube.core.responses import api_response
from vidtube.db.database import get_db
from vidtube.models.user import User
from vidtube.services.dashboard_service import DashboardService

router = APIRouter()


@router.get("/stats")
async def get_channel_stats(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    stats = await DashboardService.channel_stats(db, current_user)
    return api_response(stats, "Channel stats fetched successfully")


@router.get("/videos")
async def get_channel_videos(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    videos = await DashboardService.channel_videos(db, current_user)
    return api_response(videos, "Channel videos fetched successfully")
