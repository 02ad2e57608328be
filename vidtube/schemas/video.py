"""
Video schemas for request/response models
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional
from datetime import datetime
from uuid import UUID

from vidtube.schemas.common import MediaAsset, OwnerSummary

SortField = Literal["created_at", "updated_at", "title", "views", "duration"]
SortDirection = Literal["asc", "desc"]


class VideoResponse(BaseModel):
    id: UUID
    video_file: MediaAsset
    thumbnail: MediaAsset
    title: str
    description: str
    duration: float
    views: int
    is_published: bool
    owner: UUID = Field(validation_alias="owner_id")
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class VideoWithOwner(BaseModel):
    """Video projection with the owner resolved to a user summary"""
    id: UUID
    video_file: MediaAsset
    thumbnail: MediaAsset
    title: str
    description: str
    duration: float
    views: int
    is_published: bool
    owner: OwnerSummary
    created_at: datetime


class VideoUpdate(BaseModel):
    """Patch of editable video fields"""
    title: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None


class VideoListQuery(BaseModel):
    """Filters and ordering for the paginated listing"""
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    query: Optional[str] = None
    sort_by: SortField = "created_at"
    sort_type: SortDirection = "desc"
    user_id: Optional[UUID] = None


class VideoDeleteResult(BaseModel):
    deleted_comments: int
    deleted_likes: int
    removed_from_playlists: int
    pending_asset_cleanup: List[str] = Field(default_factory=list)
