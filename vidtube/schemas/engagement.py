"""
Schemas for toggles (likes, subscriptions) and subscriber listings
"""

from pydantic import BaseModel
from typing import Literal
from datetime import datetime
from uuid import UUID

from vidtube.schemas.common import MediaAsset

ToggleAction = Literal["added", "removed"]


class LikeToggleResponse(BaseModel):
    action: ToggleAction
    is_liked: bool


class SubscriptionToggleResponse(BaseModel):
    action: ToggleAction
    is_subscribed: bool


class SubscriptionUser(BaseModel):
    """User on either side of a subscription"""
    id: UUID
    username: str
    fullname: str
    avatar: MediaAsset
    subscribed_at: datetime
