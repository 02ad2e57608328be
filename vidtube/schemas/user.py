"""
User schemas for request/response models
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional
from datetime import datetime
from uuid import UUID

from vidtube.schemas.common import MediaAsset


class UserResponse(BaseModel):
    """Public user record (never carries the password hash or refresh token)"""
    id: UUID
    username: str
    email: str
    fullname: str
    avatar: MediaAsset
    cover_image: Optional[MediaAsset] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserDetailsUpdate(BaseModel):
    """Patch of the editable profile fields"""
    fullname: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None


class ChannelProfileResponse(BaseModel):
    """Channel page of a user as seen by the requesting user"""
    id: UUID
    username: str
    fullname: str
    email: str
    avatar: MediaAsset
    cover_image: Optional[MediaAsset] = None
    subscribers_count: int
    channels_subscribed_to_count: int
    is_subscribed: bool
    created_at: datetime
