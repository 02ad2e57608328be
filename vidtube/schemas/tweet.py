"""
Tweet schemas
"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from uuid import UUID


class TweetCreate(BaseModel):
    content: str = Field(..., max_length=1000)


class TweetUpdate(BaseModel):
    content: str = Field(..., max_length=1000)


class TweetResponse(BaseModel):
    id: UUID
    content: str
    owner: UUID = Field(validation_alias="owner_id")
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)
