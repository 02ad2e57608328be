"""
Playlist schemas
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from uuid import UUID


class PlaylistCreate(BaseModel):
    name: str = Field(..., max_length=255)
    description: str = ""


class PlaylistUpdate(BaseModel):
    """Patch of playlist fields; omitted fields stay unchanged"""
    name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None


class PlaylistResponse(BaseModel):
    id: UUID
    name: str
    description: str
    owner: UUID
    videos: List[UUID] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
