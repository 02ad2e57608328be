"""
Comment schemas
"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from uuid import UUID

from vidtube.schemas.common import OwnerSummary


class CommentCreate(BaseModel):
    content: str = Field(..., max_length=5000)


class CommentUpdate(BaseModel):
    content: str = Field(..., max_length=5000)


class CommentResponse(BaseModel):
    id: UUID
    content: str
    video: UUID = Field(validation_alias="video_id")
    owner: UUID = Field(validation_alias="owner_id")
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class CommentWithOwner(BaseModel):
    """Comment listed under a video, with author and like count"""
    id: UUID
    content: str
    video: UUID
    owner: OwnerSummary
    likes_count: int
    created_at: datetime
    updated_at: datetime
