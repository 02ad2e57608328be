"""
Comment endpoints
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.core.deps import get_current_user
from vidtube.core.responses import api_response
from vidtube.db.database import get_db
from vidtube.models.user import User
from vidtube.schemas.comment import CommentCreate, CommentUpdate
from vidtube.schemas.common import PageParams
from vidtube.services.comment_service import CommentService

router = APIRouter()


@router.get("/{video_id}")
async def get_video_comments(
    video_id: UUID,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comments = await CommentService.list_comments(db, video_id, current_user, PageParams(page=page, limit=limit))
    return api_response(comments, "Comments fetched successfully")


@router.post("/{video_id}", status_code=status.HTTP_201_CREATED)
async def add_comment(
    video_id: UUID,
    payload: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comment = await CommentService.add_comment(db, video_id, current_user, payload.content)
    return api_response(comment, "Comment added successfully", status.HTTP_201_CREATED)


@router.patch("/c/{comment_id}")
async def update_comment(
    comment_id: UUID,
    payload: CommentUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    comment = await CommentService.update_comment(db, comment_id, current_user, payload.content)
    return api_response(comment, "Comment updated successfully")


@router.delete("/c/{comment_id}")
async def delete_comment(
    comment_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await CommentService.delete_comment(db, comment_id, current_user)
    return api_response({}, "Comment deleted successfully")
