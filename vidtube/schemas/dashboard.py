"""
Dashboard schemas
"""

from pydantic import BaseModel, ConfigDict, Field


class ChannelStats(BaseModel):
    total_videos: int = Field(0, alias="TotalVideos")
    total_views: int = Field(0, alias="TotalViews")
    total_subscribers: int = Field(0, alias="TotalSubscribers")
    total_likes: int = Field(0, alias="TotalLikes")

    model_config = ConfigDict(populate_by_name=True)
